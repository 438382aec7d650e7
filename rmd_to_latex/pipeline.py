"""Main conversion pipeline orchestrating Rmarkdown to F1000 LaTeX conversion."""

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .exceptions import InputNotFoundError, WriteFailureError
from .post_processing import TableProcessor, TableProcessorConfig
from .processing import (
    ConversionResult,
    FormatConverterBase,
    KnitrRenderer,
    PandocConverter,
    RenderEngineBase,
    copy_resources,
    copy_tree,
    make_archive,
)
from .processing.pandoc_converter import DEFAULT_PANDOC_ARGS


logger = logging.getLogger(__name__)


TEMPLATE_DIR = Path(__file__).parent / "templates"
DEFAULT_TEMPLATE = TEMPLATE_DIR / "template_F1000SoftwareArticle.tex"
DEFAULT_STYLE_FILES = (TEMPLATE_DIR / "f1000_styles.sty",)


@dataclass
class PipelineConfig:
    """Configuration for the conversion pipeline."""
    # Output directory (default: the input document's directory)
    output_dir: Optional[Path] = None

    # Zip the output directory for upload to Overleaf
    compress: bool = True

    # Render backend (default: knitr through Rscript)
    renderer: str = "knitr"
    rscript: str = "Rscript"

    # pandoc settings
    template: Optional[Path] = DEFAULT_TEMPLATE
    pandoc_args: tuple[str, ...] = DEFAULT_PANDOC_ARGS

    # Files copied next to the LaTeX output
    style_files: tuple[Path, ...] = DEFAULT_STYLE_FILES

    # Table processing settings
    table_config: TableProcessorConfig = field(default_factory=TableProcessorConfig)

    # Processing flags
    process_tables: bool = True
    copy_resources: bool = True


class ConversionPipeline:
    """Orchestrates the Rmarkdown to LaTeX conversion process.

    Pipeline stages:
    1. Render - knitr evaluates code chunks into a markdown document
    2. Resources - figures and bibliography copied into the work dir
    3. Convert - pandoc applies the F1000 template
    4. Tables - longtable blocks rewritten as tabledata
    5. Assets - resources, generated figures and styles copied to output
    6. Archive - output directory zipped (optional)
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        renderer: Optional[RenderEngineBase] = None,
        converter: Optional[FormatConverterBase] = None
    ):
        """Initialize the pipeline.

        Args:
            config: Pipeline configuration.
            renderer: Render engine, created from the config if omitted.
            converter: Format converter, pandoc if omitted.
        """
        self.config = config or PipelineConfig()
        self._renderer = renderer
        self._converter = converter

    @property
    def renderer(self) -> RenderEngineBase:
        """Get or create the render engine."""
        if self._renderer is None:
            if self.config.renderer == "knitr":
                self._renderer = KnitrRenderer(rscript=self.config.rscript)
            else:
                raise ValueError(f"Unknown renderer: {self.config.renderer}")
        return self._renderer

    @property
    def converter(self) -> FormatConverterBase:
        """Get or create the format converter."""
        if self._converter is None:
            self._converter = PandocConverter()
        return self._converter

    def _prepare_output_dir(self, input_path: Path) -> Path:
        output_dir = Path(self.config.output_dir) if self.config.output_dir else input_path.parent
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteFailureError(output_dir, str(e)) from e
        return output_dir.resolve()

    def convert(self, input_path: Union[str, Path]) -> ConversionResult:
        """Run the full conversion pipeline.

        Args:
            input_path: Path to the Rmarkdown file.

        Returns:
            ConversionResult describing the written files.
        """
        path = Path(input_path)
        if not path.is_file():
            raise InputNotFoundError(path)
        path = path.resolve()

        output_dir = self._prepare_output_dir(path)
        output_file = output_dir / f"{path.stem}.tex"
        result = ConversionResult(tex_path=output_file, output_dir=output_dir)

        logger.info(f"Starting conversion of {path.name}")

        with tempfile.TemporaryDirectory(prefix="rmd_to_latex_") as tmp:
            work_dir = Path(tmp)
            markdown_file = work_dir / f"{path.stem}.md"
            latex_file = work_dir / f"{path.stem}.tmp.tex"

            # Stage 1: Render code chunks
            logger.info(f"Stage 1: Rendering with {self.renderer.name}")
            self.renderer.render(path, markdown_file, work_dir)

            # Stage 2: Resources needed by pandoc
            if self.config.copy_resources:
                logger.info("Stage 2: Copying external resources to work dir")
                copy_resources(path, work_dir)

            # Stage 3: Apply the journal template
            logger.info(f"Stage 3: Converting to LaTeX with {self.converter.name}")
            self.converter.convert(
                markdown_file,
                latex_file,
                template=self.config.template,
                extra_args=self.config.pandoc_args,
            )

            # Stage 4: pandoc writes longtable, the template expects tabledata
            if self.config.process_tables:
                logger.info("Stage 4: Rewriting tables")
                processor = TableProcessor(self.config.table_config)
                processor.process_file(latex_file, output_file)
                result.table_stats = processor.stats
            else:
                try:
                    shutil.copyfile(latex_file, output_file)
                except OSError as e:
                    raise WriteFailureError(output_file, str(e)) from e

            # Stage 5: Copy everything the LaTeX document needs
            logger.info("Stage 5: Copying assets to output")
            try:
                if self.config.copy_resources:
                    result.resources = copy_resources(path, output_dir)
                # knitr writes generated plots to figure/ in its working dir
                figure_dir = work_dir / "figure"
                if figure_dir.is_dir():
                    copy_tree(figure_dir, output_dir)
                for style_file in self.config.style_files:
                    shutil.copy2(style_file, output_dir)
            except OSError as e:
                raise WriteFailureError(output_dir, str(e)) from e

        # Stage 6: Archive for Overleaf
        if self.config.compress:
            logger.info("Stage 6: Compressing output directory")
            result.archive_path = make_archive(output_dir)

        logger.info(f"Output file has been written to:\n\t{output_dir}")
        return result


def quick_convert(
    input_path: Union[str, Path],
    output_dir: Optional[Union[str, Path]] = None,
    compress: bool = True
) -> ConversionResult:
    """Quick conversion function for simple use cases.

    Args:
        input_path: Path to the Rmarkdown file.
        output_dir: Output directory (default: next to the input).
        compress: Whether to zip the output directory.

    Returns:
        ConversionResult describing the written files.
    """
    config = PipelineConfig(
        output_dir=Path(output_dir) if output_dir else None,
        compress=compress,
    )
    return ConversionPipeline(config).convert(input_path)
