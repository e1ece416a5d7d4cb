"""
Exception and warning types raised by the station planner.

All errors subclass ``ValueError`` so callers that already catch the builtin
keep working.
"""


class InvalidConfigurationError(ValueError):
    """Raised when parameters or input data cannot define a valid run.

    Examples: ``n_clusters`` of zero, more clusters than points, a
    non-positive search step, or an empty bounding rectangle.
    """


class EmptyClusterError(ValueError):
    """Raised when a median is requested for a cluster with no points."""


class ConvergenceWarning(UserWarning):
    """Issued when an iterative procedure stops on its iteration budget."""
