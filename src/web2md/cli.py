"""Command-line interface for web2md."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console

from . import __version__
from .converter import WebToMarkdownConverter
from .logging_config import setup_logging

USAGE_EXAMPLES = """
Examples:
  web2md https://example.com
  web2md "<h1>Hello</h1>" -type html
  web2md https://example.com -toFile output.md
"""


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="web2md",
        usage="web2md <input> [-type url|html] [-toFile output.md]",
        description="Convert a web page or an HTML string to Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=USAGE_EXAMPLES,
    )

    parser.add_argument(
        "input",
        nargs="?",
        help="URL to fetch, or HTML when -type html is given",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-type",
        "--type",
        dest="input_type",
        choices=["url", "html"],
        default="url",
        help="Kind of input (default: url)",
    )

    parser.add_argument(
        "-toFile",
        "--to-file",
        dest="output_file",
        type=Path,
        default=None,
        metavar="PATH",
        help="Write Markdown to this file instead of stdout",
    )

    # Conversion settings
    conversion_group = parser.add_argument_group("conversion settings")
    conversion_group.add_argument(
        "--retain-images",
        choices=["none", "alt", "alt_p", "all"],
        default="all",
        help="How images are kept (default: all)",
    )
    gfm_group = conversion_group.add_mutually_exclusive_group()
    gfm_group.add_argument(
        "--no-gfm",
        action="store_true",
        help="Disable GitHub-Flavored Markdown extensions",
    )
    gfm_group.add_argument(
        "--no-gfm-tables",
        action="store_true",
        help="Disable GFM tables only",
    )
    conversion_group.add_argument(
        "--img-data-url",
        action="store_true",
        help="Replace data-URL images with stable blob: placeholders",
    )
    conversion_group.add_argument(
        "--tidy",
        action="store_true",
        help="Tidy the Markdown (fix split links, squeeze blank lines)",
    )

    # Output control
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )

    return parser


def build_converter(args: argparse.Namespace) -> WebToMarkdownConverter:
    """Build a converter from parsed arguments."""
    no_gfm: object = False
    if args.no_gfm:
        no_gfm = True
    elif args.no_gfm_tables:
        no_gfm = "table"

    return WebToMarkdownConverter(
        retain_images=args.retain_images,
        no_gfm=no_gfm,
        img_data_url_to_object_url=args.img_data_url,
    )


def run_converter(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Run the conversion with given arguments."""
    console = Console()
    err_console = Console(stderr=True)

    if not args.input:
        parser.print_usage(sys.stderr)
        print(USAGE_EXAMPLES.strip("\n"), file=sys.stderr)
        return 1

    try:
        converter = build_converter(args)

        if args.input_type == "url":
            markdown = asyncio.run(converter.url_to_markdown(args.input))
        else:
            markdown = converter.html_to_markdown(args.input)

        if args.tidy:
            markdown = converter.tidy_markdown(markdown)

        if args.output_file:
            full_path = args.output_file.resolve()
            full_path.write_text(markdown, encoding="utf-8")
            console.print(f"Output saved to: {full_path}", markup=False, highlight=False, soft_wrap=True)
        else:
            sys.stdout.write(markdown + "\n")

    except Exception as e:
        err_console.print(f"Error: {e}", markup=False, highlight=False, soft_wrap=True)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else "WARNING")

    return run_converter(args, parser)


if __name__ == "__main__":
    sys.exit(main())
