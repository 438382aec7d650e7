"""Locate pandoc longtable blocks in a LaTeX document."""

import logging
import re
from typing import Optional

from ..exceptions import MalformedTableMarkupError
from ..processing.models import TableBlock


logger = logging.getLogger(__name__)


BEGIN_LONGTABLE = re.compile(r'\\begin\{longtable\}')
END_LONGTABLE = re.compile(r'\\end\{longtable\}')

# Column spec follows the optional [position] argument, e.g.
# \begin{longtable}[]{lr} or \begin{longtable}[]{@{}ll@{}}
SPEC_START = re.compile(r'\\begin\{longtable\}\s*(?:\[[^\]]*\])?\s*\{')


def extract_justification(
    lines: list[str],
    start: int = 0,
    stop: Optional[int] = None
) -> tuple[str, int]:
    """Return the column justification token of a begin marker.

    pandoc splits the spec of tables with relative column widths over
    several lines::

        \\begin{longtable}[]{@{}
          >{\\raggedright\\arraybackslash}p{(\\columnwidth - 2\\tabcolsep) * \\real{0.50}}
          >{\\raggedleft\\arraybackslash}p{(\\columnwidth - 2\\tabcolsep) * \\real{0.50}}@{}}

    so the brace group is matched by depth across lines.

    Args:
        lines: Document lines.
        start: Index of the line containing ``\\begin{longtable}``.
        stop: Index past which the spec may not extend (default: end of lines).

    Returns:
        Tuple of (brace group with braces and line breaks kept, index of
        the line where the group closes).

    Raises:
        MalformedTableMarkupError: If no spec is present, it never closes,
            or text follows it on its closing line.
    """
    stop = len(lines) if stop is None else stop
    match = SPEC_START.search(lines[start])
    if not match:
        raise MalformedTableMarkupError(
            f"No column justification found in: {lines[start].strip()!r}", start + 1
        )

    spec_lines = []
    depth = 0
    column = match.end() - 1

    for index in range(start, stop):
        line = lines[index]
        position = column if index == start else 0
        segment_start = position
        escaped = False

        while position < len(line):
            char = line[position]
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '{':
                depth += 1
            elif char == '}':
                depth -= 1
                if depth == 0:
                    spec_lines.append(line[segment_start:position + 1])
                    if line[position + 1:].strip():
                        raise MalformedTableMarkupError(
                            "Unexpected text after column justification", index + 1
                        )
                    return '\n'.join(spec_lines), index
            position += 1

        spec_lines.append(line[segment_start:])

    raise MalformedTableMarkupError(
        "Column justification is never closed", start + 1
    )


def find_table_blocks(lines: list[str]) -> list[TableBlock]:
    """Find every longtable block in a sequence of lines.

    Begin and end markers are paired in order of appearance. Nested
    tables are not supported.

    Args:
        lines: Document lines without line terminators.

    Returns:
        Blocks ordered by position. Empty if the document has no tables.

    Raises:
        MalformedTableMarkupError: On unpaired, misordered or nested markers.
    """
    blocks = []
    open_start = None

    for index, line in enumerate(lines):
        is_begin = bool(BEGIN_LONGTABLE.search(line))
        is_end = bool(END_LONGTABLE.search(line))

        if is_begin and is_end:
            raise MalformedTableMarkupError(
                "Begin and end longtable markers on the same line", index + 1
            )

        if is_begin:
            if open_start is not None:
                raise MalformedTableMarkupError(
                    "Nested longtable environments are not supported", index + 1
                )
            open_start = index
        elif is_end:
            if open_start is None:
                raise MalformedTableMarkupError(
                    "\\end{longtable} without matching \\begin{longtable}", index + 1
                )
            justification, spec_end = extract_justification(lines, open_start, index)
            blocks.append(TableBlock(
                start=open_start,
                end=index,
                justification=justification,
                spec_end=spec_end,
            ))
            open_start = None

    if open_start is not None:
        raise MalformedTableMarkupError(
            "\\begin{longtable} is never closed", open_start + 1
        )

    if not blocks:
        logger.debug("No longtable blocks found")
    else:
        logger.debug(f"Found {len(blocks)} longtable blocks")

    return blocks
