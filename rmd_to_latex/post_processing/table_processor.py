"""Document-level longtable post-processing for pandoc LaTeX output."""

import logging
import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from ..exceptions import InputNotFoundError, WriteFailureError
from ..processing.models import TableStats
from .table_extractor import find_table_blocks
from .table_rewriter import TableRewriter, TableRewriterConfig


logger = logging.getLogger(__name__)


@dataclass
class TableProcessorConfig:
    """Configuration for table post-processing."""
    rewriter_config: TableRewriterConfig = field(default_factory=TableRewriterConfig)
    # Encoding of the pandoc output
    encoding: str = "utf-8"


class TableProcessor:
    """Replaces every longtable block of a document with a tabledata block.

    pandoc hardcodes ``longtable`` when converting markdown tables, which
    is not the table format the F1000 template defines. Each block is
    rewritten independently and the output is built as a fresh line
    sequence, so earlier replacements never shift later block indices.
    """

    def __init__(self, config: Optional[TableProcessorConfig] = None):
        """Initialize the table processor.

        Args:
            config: Processing configuration.
        """
        self.config = config or TableProcessorConfig()
        self.rewriter = TableRewriter(self.config.rewriter_config)
        self.stats = TableStats()

    def process_lines(self, lines: list[str]) -> list[str]:
        """Rewrite all longtable blocks in a list of lines.

        Args:
            lines: Document lines without line terminators.

        Returns:
            New list of lines. Each rewritten block occupies a single
            entry holding a multi-line string.
        """
        self.stats = TableStats()
        blocks = find_table_blocks(lines)
        if not blocks:
            return list(lines)

        row_prefix = self.config.rewriter_config.row_tag + " "
        result = []
        position = 0

        for block in blocks:
            result.extend(lines[position:block.start])
            rewritten = self.rewriter.rewrite(
                lines[block.start:block.end + 1],
                block.justification,
                spec_line_count=block.spec_end - block.start + 1,
            )
            result.append(rewritten)
            position = block.end + 1

            self.stats.table_count += 1
            self.stats.row_count += sum(
                1 for line in rewritten.split('\n') if line.startswith(row_prefix)
            )
            self.stats.lines_removed += block.line_count - 1

        result.extend(lines[position:])

        logger.info(
            f"Rewrote {self.stats.table_count} tables "
            f"({self.stats.row_count} data rows)"
        )
        return result

    def process_text(self, text: str) -> str:
        """Rewrite all longtable blocks in a LaTeX string.

        Args:
            text: Full document text.

        Returns:
            Document text with tables rewritten. Line terminators (LF or
            CRLF) and the presence of a final newline are kept.
        """
        return self._transform(text)[1]

    def _transform(self, text: str) -> tuple[list[str], str]:
        """Rewrite tables, returning the new lines and the joined text."""
        eol = _detect_eol(text)
        trailing_newline = text.endswith(eol)
        lines = text.split(eol)
        if trailing_newline:
            lines.pop()

        result = self.process_lines(lines)
        if not self.stats.table_count:
            return result, text

        # Rewritten blocks are joined with \n internally
        content = eol.join(line.replace('\n', eol) for line in result)
        if trailing_newline:
            content += eol
        return result, content

    def process_file(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path]
    ) -> list[str]:
        """Rewrite the tables of a LaTeX file into another file.

        The output is written to a temporary file next to the destination
        and renamed into place, so a failure never leaves partial output.

        Args:
            input_path: LaTeX file produced by pandoc.
            output_path: Destination file.

        Returns:
            The transformed document lines.
        """
        input_path = Path(input_path)
        output_path = Path(output_path)

        if not input_path.is_file():
            raise InputNotFoundError(input_path)

        with open(input_path, 'r', encoding=self.config.encoding, newline='') as f:
            text = f.read()

        result, content = self._transform(text)

        _write_atomic(output_path, content, self.config.encoding)
        logger.debug(f"Tables written to {output_path}")
        return result


def _detect_eol(text: str) -> str:
    """Return the line terminator used by text (CRLF or LF)."""
    return '\r\n' if '\r\n' in text else '\n'


def _file_mode(path: Path) -> int:
    """Mode for a written file: the existing file's, else the umask default."""
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _write_atomic(path: Path, content: str, encoding: str) -> None:
    """Write content to path via a temporary file and rename."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteFailureError(path.parent, str(e)) from e

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, 'w', encoding=encoding, newline='') as f:
            f.write(content)
        # mkstemp creates files readable by the owner only
        os.chmod(tmp_name, _file_mode(path))
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise WriteFailureError(path, str(e)) from e


def rewrite_tables(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    config: Optional[TableProcessorConfig] = None
) -> list[str]:
    """Rewrite pandoc longtables in ``input_path`` and write ``output_path``.

    Args:
        input_path: LaTeX file produced by pandoc.
        output_path: Destination file.
        config: Optional processing configuration.

    Returns:
        The transformed document lines.
    """
    return TableProcessor(config).process_file(input_path, output_path)
