"""Discovery and copying of files an Rmarkdown document depends on."""

import logging
import re
import shutil
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)


FRONT_MATTER = re.compile(r'\A---[ \t]*\n(.*?)\n(?:---|\.\.\.)[ \t]*$', re.DOTALL | re.MULTILINE)

MARKDOWN_IMAGE = re.compile(r'!\[[^\]]*\]\(\s*<?([^)\s>]+)>?(?:\s+"[^"]*")?\s*\)')
INCLUDE_GRAPHICS_R = re.compile(r'include_graphics\(\s*(?:path\s*=\s*)?["\']([^"\']+)["\']')
INCLUDE_GRAPHICS_TEX = re.compile(r'\\includegraphics(?:\[[^\]]*\])?\{([^}]+)\}')

# YAML keys whose values name files next to the document
RESOURCE_KEYS = ("bibliography", "csl")


def _strip_quotes(value: str) -> str:
    return value.strip().strip('"\'').strip()


def _front_matter_files(front_matter: str) -> list[str]:
    """Collect file names listed under resource keys of the YAML header.

    Handles scalar values, inline lists and block lists::

        bibliography: refs.bib
        bibliography: [a.bib, b.bib]
        bibliography:
          - a.bib
    """
    files = []
    lines = front_matter.split('\n')

    for index, line in enumerate(lines):
        match = re.match(r'^(\w+)\s*:\s*(.*)$', line)
        if not match or match.group(1) not in RESOURCE_KEYS:
            continue

        value = match.group(2).strip()
        if value.startswith('['):
            files.extend(
                _strip_quotes(item) for item in value.strip('[]').split(',') if item.strip()
            )
        elif value:
            files.append(_strip_quotes(value))
        else:
            for item in lines[index + 1:]:
                item_match = re.match(r'^\s+-\s*(.+)$', item)
                if not item_match:
                    break
                files.append(_strip_quotes(item_match.group(1)))

    return files


def find_external_resources(rmd_path: Union[str, Path]) -> list[Path]:
    """Find auxiliary files referenced by an Rmarkdown document.

    Looks at images (markdown syntax, ``knitr::include_graphics`` and
    ``\\includegraphics``) and at bibliography/CSL files declared in the
    YAML header. Only local files that exist are returned.

    Args:
        rmd_path: Path to the Rmarkdown file.

    Returns:
        Paths relative to the document's directory, in order of first
        reference, without duplicates.
    """
    rmd_path = Path(rmd_path)
    text = rmd_path.read_text(encoding='utf-8')
    base = rmd_path.parent

    candidates = []
    front_matter = FRONT_MATTER.search(text)
    if front_matter:
        candidates.extend(_front_matter_files(front_matter.group(1)))

    for pattern in (MARKDOWN_IMAGE, INCLUDE_GRAPHICS_R, INCLUDE_GRAPHICS_TEX):
        candidates.extend(match.group(1).strip() for match in pattern.finditer(text))

    resources = []
    seen = set()
    for candidate in candidates:
        if not candidate or '://' in candidate:
            continue
        relative = Path(candidate)
        if relative.is_absolute() or relative in seen:
            continue
        seen.add(relative)
        if (base / relative).is_file():
            resources.append(relative)
        else:
            logger.debug(f"Referenced resource not found: {candidate}")

    return resources


def copy_resources(rmd_path: Union[str, Path], dest: Union[str, Path]) -> list[Path]:
    """Copy the external resources of a document into ``dest``.

    Relative locations are kept so references in the LaTeX output still
    resolve.

    Args:
        rmd_path: Path to the Rmarkdown file.
        dest: Destination directory.

    Returns:
        List of copied file paths inside ``dest``.
    """
    rmd_path = Path(rmd_path)
    dest = Path(dest)
    copied = []

    for relative in find_external_resources(rmd_path):
        source = rmd_path.parent / relative
        target = dest / relative
        # Output next to the document: files are already in place
        if target.exists() and target.samefile(source):
            copied.append(target)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)
        copied.append(target)

    if copied:
        logger.debug(f"Copied {len(copied)} resources to {dest}")
    return copied


def copy_tree(src: Union[str, Path], dest: Union[str, Path]) -> Path:
    """Copy a directory into ``dest``, merging with existing content.

    Args:
        src: Directory to copy.
        dest: Parent directory receiving ``src``'s folder.

    Returns:
        Path of the copied directory.
    """
    src = Path(src)
    target = Path(dest) / src.name
    shutil.copytree(src, target, dirs_exist_ok=True)
    return target
