"""Processing module wrapping the external render and conversion engines."""

from .archive import archive_path_for, make_archive
from .converter_interface import FormatConverterBase, RenderEngineBase
from .knitr_renderer import KnitrRenderer
from .models import ConversionResult, TableBlock, TableStats
from .pandoc_converter import PandocConverter
from .resources import copy_resources, copy_tree, find_external_resources

__all__ = [
    "RenderEngineBase",
    "FormatConverterBase",
    "KnitrRenderer",
    "PandocConverter",
    "ConversionResult",
    "TableBlock",
    "TableStats",
    "find_external_resources",
    "copy_resources",
    "copy_tree",
    "archive_path_for",
    "make_archive",
]
