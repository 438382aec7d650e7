"""Command-line interface for rmd-to-latex converter."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .exceptions import RmdToLatexError
from .pipeline import ConversionPipeline, PipelineConfig
from .post_processing import TableProcessor


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _report_error(error: Exception, verbose: bool) -> int:
    logger.error(f"Error: {error}")
    if verbose:
        import traceback
        traceback.print_exc()
    return 1


def cmd_convert(args: argparse.Namespace) -> int:
    """Handle the convert command."""
    input_path = Path(args.input)

    if not input_path.exists():
        logger.error(f"Error: File not found: {input_path}")
        return 1

    config = PipelineConfig(
        output_dir=Path(args.output) if args.output else None,
        compress=not args.no_compress,
        rscript=args.rscript,
        process_tables=not args.keep_tables,
    )
    if args.template:
        config.template = Path(args.template)

    pipeline = ConversionPipeline(config)

    try:
        result = pipeline.convert(input_path)
    except RmdToLatexError as e:
        return _report_error(e, args.verbose)

    logger.info(f"[OK] Converted: {input_path.name} -> {result.tex_path.name}")
    if result.archive_path:
        logger.info(f"[OK] Archive: {result.archive_path}")
    return 0


def cmd_tables(args: argparse.Namespace) -> int:
    """Handle the tables command (rewrite tables of an existing .tex)."""
    processor = TableProcessor()

    try:
        processor.process_file(args.input, args.output)
    except RmdToLatexError as e:
        return _report_error(e, args.verbose)

    logger.info(
        f"[OK] {processor.stats.table_count} tables rewritten -> {args.output}"
    )
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog='rmd-to-latex',
        description='Convert Rmarkdown documents to F1000Research LaTeX'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Convert command
    convert_parser = subparsers.add_parser(
        'convert',
        help='Convert a single Rmarkdown file'
    )
    convert_parser.add_argument(
        'input',
        help='Path to input Rmd file'
    )
    convert_parser.add_argument(
        '-o', '--output',
        help='Output directory (default: directory of the input file)'
    )
    convert_parser.add_argument(
        '--no-compress',
        action='store_true',
        help='Do not create a zip archive of the output directory'
    )
    convert_parser.add_argument(
        '--template',
        help='pandoc LaTeX template (default: bundled F1000 template)'
    )
    convert_parser.add_argument(
        '--rscript',
        default='Rscript',
        help='Rscript executable used to run knitr (default: Rscript)'
    )
    convert_parser.add_argument(
        '--keep-tables',
        action='store_true',
        help='Leave pandoc longtable environments untouched'
    )
    convert_parser.set_defaults(func=cmd_convert)

    # Tables command
    tables_parser = subparsers.add_parser(
        'tables',
        help='Rewrite longtable blocks of an existing LaTeX file'
    )
    tables_parser.add_argument(
        'input',
        help='Path to LaTeX file produced by pandoc'
    )
    tables_parser.add_argument(
        'output',
        help='Path for the rewritten LaTeX file'
    )
    tables_parser.set_defaults(func=cmd_tables)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.verbose)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
