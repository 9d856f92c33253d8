"""Plotting exceptions for consistent error handling."""

from pathlib import Path
from typing import Optional, Tuple, Union


class PlotError(Exception):
    """Base plotting error."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.original_exception = original_exception


class DatasetNotFoundError(PlotError):
    """Raised when the input dataset does not exist or matches no files."""
    pass


class ShapeDecodeError(PlotError):
    """Raised when a record cannot be decoded into a shape."""
    def __init__(self, message: str,
                 source: Optional[Union[str, Path]] = None,
                 line_number: Optional[int] = None,
                 original_exception: Optional[Exception] = None):
        location = ''
        if source is not None:
            location = f"{source}"
            if line_number is not None:
                location += f":{line_number}"
            location += ": "
        super().__init__(f"{location}{message}", original_exception)
        self.message = message
        self.source = str(source) if source is not None else None
        self.line_number = line_number

    def __reduce__(self):
        return (self.__class__,
                (self.message, self.source, self.line_number, self.original_exception))


class EmptyDatasetError(PlotError):
    """Raised when a dataset holds nothing needed by the requested operation."""
    pass


class MissingTileError(PlotError):
    """Raised when the tile merge does not receive one tile per grid cell."""
    def __init__(self, expected: int, received: int):
        super().__init__(f"Expected {expected} tiles but received {received}")
        self.expected = expected
        self.received = received

    def __reduce__(self):
        return (self.__class__, (self.expected, self.received))


class TileRenderError(PlotError):
    """Raised when rendering a single grid cell fails."""
    def __init__(self, cell: Tuple[int, int], original_exception: Exception):
        col, row = cell
        super().__init__(
            f"Rendering cell ({col}, {row}) failed: {original_exception}",
            original_exception
        )
        self.cell = cell

    def __reduce__(self):
        return (self.__class__, (self.cell, self.original_exception))


class MissingImageError(PlotError):
    """Raised when an image required for combination is absent."""
    pass


class OutputExistsError(PlotError):
    """Raised when the output path exists and overwriting was not requested."""
    pass


class OutputNotWritableError(PlotError):
    """Raised when the output location cannot be written."""
    pass


class PlotCancelledError(PlotError):
    """Raised when a plot job is cancelled before completion."""
    pass
