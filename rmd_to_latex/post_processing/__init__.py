"""Post-processing module for pandoc LaTeX output."""

from .table_extractor import extract_justification, find_table_blocks
from .table_processor import TableProcessor, TableProcessorConfig, rewrite_tables
from .table_rewriter import TableRewriter, TableRewriterConfig

__all__ = [
    "find_table_blocks",
    "extract_justification",
    "TableRewriter",
    "TableRewriterConfig",
    "TableProcessor",
    "TableProcessorConfig",
    "rewrite_tables",
]
