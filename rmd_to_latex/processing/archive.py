"""Zip archives of conversion output for upload to Overleaf."""

import logging
import zipfile
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)


def archive_path_for(output_dir: Union[str, Path]) -> Path:
    """Return the zip path for an output directory (``out/`` -> ``out.zip``)."""
    output_dir = Path(output_dir).resolve()
    return output_dir.with_name(output_dir.name + '.zip')


def make_archive(output_dir: Union[str, Path]) -> Path:
    """Compress an output directory into a zip file beside it.

    Entries keep the directory's own name as their top-level folder.

    Args:
        output_dir: Directory to compress.

    Returns:
        Path to the created zip file.
    """
    output_dir = Path(output_dir).resolve()
    zip_path = archive_path_for(output_dir)

    with zipfile.ZipFile(zip_path, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
        for path in sorted(output_dir.rglob('*')):
            if path.is_file():
                zf.write(path, f"{output_dir.name}/{path.relative_to(output_dir).as_posix()}")

    logger.info(f"Archive written to {zip_path}")
    return zip_path
