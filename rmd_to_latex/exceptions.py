"""Exceptions raised during Rmarkdown to LaTeX conversion."""

from pathlib import Path
from typing import Optional, Union


class RmdToLatexError(Exception):
    """Base class for all conversion errors."""


class InputNotFoundError(RmdToLatexError):
    """The input document does not exist."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"Cannot find input file: {self.path}")


class MalformedTableMarkupError(RmdToLatexError):
    """A longtable block cannot be paired or restructured."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)


class WriteFailureError(RmdToLatexError):
    """The destination could not be created or written."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        super().__init__(f"Cannot write {self.path}: {reason}")


class RenderError(RmdToLatexError):
    """The render engine failed to produce an intermediate document."""


class ConversionError(RmdToLatexError):
    """The format converter failed to produce LaTeX."""
