"""Render engine implementation using knitr via Rscript."""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Union

from ..exceptions import RenderError
from .converter_interface import RenderEngineBase


logger = logging.getLogger(__name__)


def _r_string(value: Union[str, Path]) -> str:
    """Quote a value as an R string literal."""
    escaped = str(value).replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'


class KnitrRenderer(RenderEngineBase):
    """Renders Rmarkdown with knitr using LaTeX output hooks.

    ``knitr::render_latex()`` makes code chunks come out as LaTeX while
    the prose stays markdown, leaving a half-way document for pandoc.
    """

    def __init__(self, rscript: str = "Rscript", timeout: int = 600):
        """Initialize the renderer.

        Args:
            rscript: Name or path of the Rscript executable.
            timeout: Maximum seconds to wait for knitr.
        """
        self.rscript = rscript
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "knitr"

    def build_expression(self, source: Union[str, Path], output: Union[str, Path]) -> str:
        """Build the R expression that knits ``source`` into ``output``."""
        return (
            "knitr::render_latex(); "
            f"knitr::knit({_r_string(source)}, output = {_r_string(output)}, quiet = TRUE)"
        )

    def render(
        self,
        source: Union[str, Path],
        output: Union[str, Path],
        workdir: Union[str, Path]
    ) -> Path:
        """Knit an Rmarkdown file into markdown with LaTeX code chunks.

        Args:
            source: Path to the Rmarkdown file.
            output: Path for the intermediate markdown file.
            workdir: Working directory for knitr; figures are written
                to its ``figure/`` subdirectory.

        Returns:
            Path to the intermediate document.
        """
        executable = shutil.which(self.rscript)
        if executable is None:
            raise RenderError(f"Rscript executable not found: {self.rscript}")

        source = Path(source).resolve()
        output = Path(output).resolve()
        command = [executable, "-e", self.build_expression(source, output)]
        logger.debug(f"Running {' '.join(command)}")

        try:
            completed = subprocess.run(
                command,
                cwd=str(workdir),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise RenderError(f"knitr timed out after {self.timeout}s") from e

        if completed.returncode != 0:
            raise RenderError(
                f"knitr failed on {source.name}: {completed.stderr.strip()}"
            )
        if not output.exists():
            raise RenderError(f"knitr produced no output for {source.name}")

        return output
