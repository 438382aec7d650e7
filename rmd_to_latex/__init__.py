"""Rmd-to-LaTeX: Rmarkdown to F1000Research LaTeX conversion."""

from .exceptions import (
    ConversionError,
    InputNotFoundError,
    MalformedTableMarkupError,
    RenderError,
    RmdToLatexError,
    WriteFailureError,
)
from .pipeline import ConversionPipeline, PipelineConfig, quick_convert
from .post_processing import (
    TableProcessor,
    TableProcessorConfig,
    TableRewriter,
    TableRewriterConfig,
    find_table_blocks,
    rewrite_tables,
)
from .processing import (
    ConversionResult,
    FormatConverterBase,
    KnitrRenderer,
    PandocConverter,
    RenderEngineBase,
    TableBlock,
    TableStats,
)

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "ConversionPipeline",
    "PipelineConfig",
    "quick_convert",
    # Tables
    "rewrite_tables",
    "find_table_blocks",
    "TableProcessor",
    "TableProcessorConfig",
    "TableRewriter",
    "TableRewriterConfig",
    # Models
    "ConversionResult",
    "TableBlock",
    "TableStats",
    # Engines
    "RenderEngineBase",
    "FormatConverterBase",
    "KnitrRenderer",
    "PandocConverter",
    # Errors
    "RmdToLatexError",
    "InputNotFoundError",
    "MalformedTableMarkupError",
    "WriteFailureError",
    "RenderError",
    "ConversionError",
]
