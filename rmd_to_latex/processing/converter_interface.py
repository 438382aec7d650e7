"""Abstract base classes for the external document engines.

Rendering (evaluating code chunks) and format conversion (markdown to
LaTeX) are delegated to external tools. These interfaces allow the
pipeline to swap backends or substitute fakes in tests.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Union


class RenderEngineBase(ABC):
    """Evaluates the code chunks of a marked-up source document.

    Implement this interface to add new render backends.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this render backend."""
        pass

    @abstractmethod
    def render(
        self,
        source: Union[str, Path],
        output: Union[str, Path],
        workdir: Union[str, Path]
    ) -> Path:
        """Render a source document into an intermediate markdown file.

        Args:
            source: Path to the Rmarkdown file.
            output: Path for the intermediate markdown file.
            workdir: Working directory; generated figures land here.

        Returns:
            Path to the intermediate document.
        """
        pass

    def validate_source(self, source: Union[str, Path]) -> bool:
        """Check if a file looks like a renderable Rmarkdown document.

        Args:
            source: Path to the source file.

        Returns:
            True if the file exists and has an Rmarkdown extension.
        """
        path = Path(source)
        if not path.exists():
            return False
        return path.suffix.lower() in (".rmd", ".rmarkdown")


class FormatConverterBase(ABC):
    """Converts an intermediate markdown document into LaTeX.

    Implement this interface to add new conversion backends.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this converter backend."""
        pass

    @abstractmethod
    def convert(
        self,
        source: Union[str, Path],
        output: Union[str, Path],
        template: Optional[Union[str, Path]] = None,
        extra_args: Sequence[str] = ()
    ) -> Path:
        """Convert a markdown file to a complete LaTeX document.

        Args:
            source: Path to the intermediate markdown file.
            output: Path for the LaTeX output.
            template: Optional LaTeX template applied by the converter.
            extra_args: Additional converter options.

        Returns:
            Path to the LaTeX output.
        """
        pass
