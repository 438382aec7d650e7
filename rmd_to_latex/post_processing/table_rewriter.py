"""Rewrite pandoc longtable blocks into the F1000 tabledata environment."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..exceptions import MalformedTableMarkupError


logger = logging.getLogger(__name__)


TOPRULE = re.compile(r'\\toprule(?:\\noalign\{\})?\s*$')
BOTTOMRULE = re.compile(r'\\bottomrule(?:\\noalign\{\})?\s*$')
ENDHEAD = re.compile(r'\\endhead\s*$')
ENDFOOT = re.compile(r'\\end(?:last)?foot\s*$')
TABULARNEWLINE = re.compile(r'\\tabularnewline\s*$')


@dataclass
class TableRewriterConfig:
    """Configuration for the target table environment."""
    # Environment defined by the journal template
    environment: str = "tabledata"
    # Tag prefixed to the header row
    header_tag: str = "\\header"
    # Tag prefixed to each data row
    row_tag: str = "\\row"
    # Row terminator used by the target environment
    row_terminator: str = "\\\\"
    # Float environment wrapping captioned tables
    float_environment: str = "table"


def _first_match(pattern: re.Pattern, lines: list[str], start: int = 0) -> Optional[int]:
    for index in range(start, len(lines)):
        if pattern.search(lines[index]):
            return index
    return None


def _last_match(pattern: re.Pattern, lines: list[str], start: int = 0) -> Optional[int]:
    for index in range(len(lines) - 1, start - 1, -1):
        if pattern.search(lines[index]):
            return index
    return None


class TableRewriter:
    """Restructures one longtable block into a simple tagged table.

    pandoc writes markdown tables as ``longtable`` environments with
    repeated header and footer markup for page breaking. The F1000
    template expects a single header row and tagged data rows instead::

        \\begin{tabledata}{lr}
        \\header Name & Value\\\\
        \\row Alice & 1\\\\
        \\end{tabledata}

    ``\\midrule``, ``\\endfirsthead`` and repeated headers have no
    equivalent in the target environment and are dropped. A caption has no
    slot inside ``tabledata``, so captioned tables are wrapped in a
    ``table`` float that carries it.
    """

    def __init__(self, config: Optional[TableRewriterConfig] = None):
        """Initialize the rewriter.

        Args:
            config: Target environment configuration.
        """
        self.config = config or TableRewriterConfig()

    def rewrite(
        self,
        lines: list[str],
        justification: str,
        spec_line_count: int = 1
    ) -> str:
        """Rewrite a single longtable block.

        Args:
            lines: Lines of the block, begin and end markers included.
            justification: Column justification token, e.g. ``{lr}``.
            spec_line_count: Number of leading lines holding the begin
                marker and its column justification.

        Returns:
            The rewritten block as one newline separated string.

        Raises:
            MalformedTableMarkupError: If the header or rule markers are
                missing or out of order.
        """
        captions, header, data, trailing = self._split_block(lines, spec_line_count)

        result = []
        if captions:
            result.append(f"\\begin{{{self.config.float_environment}}}")
            result.extend(captions)
        result.append(f"\\begin{{{self.config.environment}}}{justification}")
        result.append(self._tag(self.config.header_tag, header))
        result.extend(self._tag(self.config.row_tag, row) for row in data)
        result.append(f"\\end{{{self.config.environment}}}")
        result.extend(
            TABULARNEWLINE.sub('', line) for line in trailing
        )
        if captions:
            result.append(f"\\end{{{self.config.float_environment}}}")

        logger.debug(f"Rewrote table {justification} with {len(data)} rows")
        return '\n'.join(result)

    def _split_block(
        self,
        lines: list[str],
        spec_line_count: int = 1
    ) -> tuple[list[str], str, list[str], list[str]]:
        """Split a block into captions, header line, data rows and trailing lines.

        Args:
            lines: Lines of the block, begin and end markers included.
            spec_line_count: Number of leading lines holding the begin
                marker and its column justification.

        Returns:
            Tuple of (caption lines, header content, data rows, lines
            after the table body).
        """
        first_toprule = _first_match(TOPRULE, lines, spec_line_count)
        last_endhead = _last_match(ENDHEAD, lines)

        if first_toprule is None:
            raise MalformedTableMarkupError("Table has no \\toprule marker")
        if last_endhead is None:
            raise MalformedTableMarkupError("Table has no \\endhead marker")
        # The header content sits between \toprule and \endhead
        if first_toprule + 1 >= last_endhead:
            raise MalformedTableMarkupError(
                "\\toprule must precede \\endhead with a header row between them",
                first_toprule + 1,
            )

        captions = [
            TABULARNEWLINE.sub('', line) for line in lines[spec_line_count:first_toprule]
            if line.strip()
        ]
        header = lines[first_toprule + 1]
        end_marker = len(lines) - 1

        # pandoc 3 places the footer (and its \bottomrule) ahead of the data
        last_foot = _last_match(ENDFOOT, lines, last_endhead + 1)
        if last_foot is not None:
            return captions, header, lines[last_foot + 1:end_marker], []

        last_bottomrule = _last_match(BOTTOMRULE, lines, last_endhead + 1)
        if last_bottomrule is None:
            raise MalformedTableMarkupError(
                "Table has no \\bottomrule after its header", last_endhead + 1
            )

        data = lines[last_endhead + 1:last_bottomrule]
        trailing = [
            line for line in lines[last_bottomrule + 1:end_marker]
            if line.strip()
        ]
        return captions, header, data, trailing

    def _tag(self, tag: str, line: str) -> str:
        """Prefix a row with its tag and convert the row terminator."""
        line = f"{tag} {line}"
        if TABULARNEWLINE.search(line):
            line = TABULARNEWLINE.sub('', line) + self.config.row_terminator
        return line
