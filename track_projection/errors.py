"""
Exception hierarchy for the GPS track plotter.

Every error is fatal for the current run: the pipeline is a one-shot batch
job and failures are deterministic given the same input.
"""


class TrackPlotterError(Exception):
    """Base class for all track plotter errors."""


class MalformedInputError(TrackPlotterError, ValueError):
    """Track file lacks the expected point structure or a coordinate is not numeric."""


class DegenerateGeometryError(TrackPlotterError, ArithmeticError):
    """A bounding box collapsed to zero width or height."""


class PrecisionEdgeCaseError(TrackPlotterError, ArithmeticError):
    """A coordinate cannot be projected to a finite Mercator value (poles, NaN)."""


class GifAssemblyError(TrackPlotterError):
    """The external image tool failed or is not installed."""
