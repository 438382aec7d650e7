"""Data models for Rmarkdown to LaTeX conversion."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class TableBlock:
    """A longtable environment located in a list of lines.

    ``start`` and ``end`` are the indices of the begin and end marker
    lines; both are part of the block. ``spec_end`` is the line where the
    column justification closes, later than ``start`` when pandoc splits
    the spec over several lines.
    """
    start: int
    end: int
    justification: str
    spec_end: int

    @property
    def line_count(self) -> int:
        return self.end - self.start + 1

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "justification": self.justification,
            "spec_end": self.spec_end,
        }


@dataclass
class TableStats:
    """Summary of a table rewriting pass."""
    table_count: int = 0
    row_count: int = 0
    lines_removed: int = 0

    def to_dict(self) -> dict:
        return {
            "table_count": self.table_count,
            "row_count": self.row_count,
            "lines_removed": self.lines_removed,
        }


@dataclass
class ConversionResult:
    """Result of converting one Rmarkdown document."""
    tex_path: Path
    output_dir: Path
    archive_path: Optional[Path] = None
    resources: list[Path] = field(default_factory=list)
    table_stats: TableStats = field(default_factory=TableStats)

    def to_dict(self) -> dict:
        return {
            "tex_path": str(self.tex_path),
            "output_dir": str(self.output_dir),
            "archive_path": str(self.archive_path) if self.archive_path else None,
            "resources": [str(r) for r in self.resources],
            "table_stats": self.table_stats.to_dict(),
        }
