"""Format converter implementation using pypandoc."""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import pypandoc

from ..exceptions import ConversionError
from .converter_interface import FormatConverterBase


logger = logging.getLogger(__name__)


DEFAULT_PANDOC_ARGS = ("--wrap=none", "--natbib")


class PandocConverter(FormatConverterBase):
    """Markdown to LaTeX converter using pandoc through pypandoc.

    Citations are left to natbib in the template; citeproc is not run.
    """

    def __init__(self, source_format: str = "markdown"):
        """Initialize the converter.

        Args:
            source_format: pandoc reader for the intermediate document.
        """
        self.source_format = source_format

    @property
    def name(self) -> str:
        return "pandoc"

    def build_args(
        self,
        template: Optional[Union[str, Path]] = None,
        extra_args: Sequence[str] = ()
    ) -> list[str]:
        """Build the pandoc command line options."""
        args = []
        if template is not None:
            args.append(f"--template={template}")
        args.extend(extra_args)
        return args

    def convert(
        self,
        source: Union[str, Path],
        output: Union[str, Path],
        template: Optional[Union[str, Path]] = None,
        extra_args: Sequence[str] = DEFAULT_PANDOC_ARGS
    ) -> Path:
        """Convert the intermediate markdown into a full LaTeX document.

        Args:
            source: Path to the intermediate markdown file.
            output: Path for the LaTeX output.
            template: pandoc LaTeX template.
            extra_args: Additional pandoc options.

        Returns:
            Path to the LaTeX output.
        """
        output = Path(output)
        args = self.build_args(template, extra_args)
        logger.debug(f"pandoc {source} -> {output} with {args}")

        try:
            pypandoc.convert_file(
                str(source),
                to="latex",
                format=self.source_format,
                extra_args=args,
                outputfile=str(output),
            )
        except (RuntimeError, OSError) as e:
            raise ConversionError(f"pandoc failed on {Path(source).name}: {e}") from e

        return output
