"""
Demo of k-median station placement.

This example shows how to:
1. Generate synthetic resource nodes on the Satisfactory map
2. Place stations with KMedian, keeping the best of several runs
3. Continue a run step by step and inspect the session best
4. Visualize the stations and the error trace
"""

import torch
import matplotlib.pyplot as plt

# Add parent directory to path for imports
import sys
sys.path.append('..')

from stationplanner import KMedian, Bounds, PointSet
from stationplanner.visualization import plot_model, plot_error_history


PURITIES = ('impure', 'normal', 'pure')


def generate_resource_nodes(n_nodes=400, n_fields=12, bounds=None):
    """Generate resource node records clustered in a few resource fields.

    Each record looks like a map marker: position plus a purity tag.
    """
    torch.manual_seed(42)
    bounds = bounds or Bounds.satisfactory()

    low = torch.tensor([bounds.left, bounds.top], dtype=torch.float64)
    span = torch.tensor([bounds.width, bounds.height], dtype=torch.float64)

    # Field centers away from the map edges
    field_centers = low + (0.1 + 0.8 * torch.rand(n_fields, 2, dtype=torch.float64)) * span

    # Nodes scattered around their field
    field_of = torch.randint(0, n_fields, (n_nodes,))
    offsets = torch.randn(n_nodes, 2, dtype=torch.float64) * 0.02 * span
    positions = field_centers[field_of] + offsets
    positions = torch.maximum(torch.minimum(positions, low + span), low)

    purity = torch.randint(0, len(PURITIES), (n_nodes,))

    return [
        {'x': float(x), 'y': float(y), 'purity': PURITIES[p]}
        for (x, y), p in zip(positions.tolist(), purity.tolist())
    ]


def print_summary(model):
    """Print the best stations and the purity mix they serve."""
    print("\n=== Session best ===")
    print(f"Total distance: {model.best_error_:,.0f}")

    for k, (center, counts) in enumerate(zip(model.best_centers_.tolist(),
                                             model.tag_summary(best=True))):
        mix = ", ".join(f"{counts.get(p, 0)} {p}" for p in PURITIES)
        print(f"Station {k:2d} at ({center[0]:>10,.0f}, {center[1]:>10,.0f}): {mix}")


def main():
    """Run the demo."""
    print("=== Station Planner Demo ===\n")

    bounds = Bounds.satisfactory()

    print("Generating synthetic resource nodes...")
    records = generate_resource_nodes(n_nodes=400, n_fields=12, bounds=bounds)
    points = PointSet.from_records(records)
    print(f"Nodes: {len(points)}, purities: {points.tag_counts()}\n")

    # Place stations, best of several randomized runs
    print("Fitting KMedian...")
    model = KMedian(
        n_clusters=10,
        bounds=bounds,
        n_init=8,
        verbose=1,
        random_state=42
    )
    model.fit(points)

    print(f"\nLast run: {model.n_iter_} iterations, state {model.state_.value}")

    # Step once more from where the last run stopped
    print("\nContinuing the last run...")
    result = model.run()
    print(f"Total distance {result.total_error:,.0f} after {model.n_iter_} iterations")

    print_summary(model)

    # Visualize results
    print("\nPlotting results...")
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(16, 8))
    plot_model(model, ax=ax1)
    plot_error_history([s.objective_value for s in model.history_], ax=ax2,
                       title='Total distance, last run')
    plt.tight_layout()
    plt.show()

    fig, ax = plt.subplots(figsize=(8, 4))
    plot_error_history(model.best_history_, ax=ax, title='Best so far, whole session')
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
