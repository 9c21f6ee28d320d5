"""
cli.py
======
Command line entry point for quiz question extraction.
"""

import argparse
import os
import sys

import logfire
from dotenv import load_dotenv
from rich.console import Console

from quizcrawl.exceptions import QuizCrawlError
from quizcrawl.models import SelectorConfig
from quizcrawl.outputs import OUTPUT_FORMATS
from quizcrawl.pipeline import THEME, ExtractionPipeline
from quizcrawl.storage import SelectorStorage, load_config_file
from quizcrawl.utils.logging import setup_local_logging


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(description='Extract quiz questions from HTML pages using CSS selectors')
    parser.add_argument('--url', action='append', default=[], help='Page URL to process (repeatable)')
    parser.add_argument('--html', action='append', default=[], help='Saved HTML file to process (repeatable)')
    parser.add_argument('--file', type=str, help='File containing URLs or HTML paths (one per line)')
    parser.add_argument('--limit', type=int, help='Limit number of sources to process')
    parser.add_argument('--config', type=str, help='JSON selector config overriding the registry')
    parser.add_argument('--save-config', metavar='DOMAIN', help='Store --config as the selectors for DOMAIN')
    parser.add_argument('--list-configs', action='store_true', help='Show available selector configurations')
    parser.add_argument('--format', choices=OUTPUT_FORMATS, default='json', help='Output format (default: json)')
    parser.add_argument('--output', metavar='DIR', help='Directory for extracted questions (default: .quizcrawl/output)')
    parser.add_argument('--no-save', action='store_true', help='Do not write extracted questions to disk')
    parser.add_argument('--no-images', action='store_true', help='Keep image references instead of embedding them')
    parser.add_argument('--show', action='store_true', help='Print a table of the extracted questions')
    parser.add_argument(
        '--timeout',
        type=float,
        default=float(os.getenv('QUIZCRAWL_TIMEOUT', '30')),
        help='Seconds allowed per page and per image (default: 30)',
    )
    parser.add_argument(
        '--log-level',
        default=os.getenv('QUIZCRAWL_LOG_LEVEL', 'INFO'),
        help='Level for the log file in .quizcrawl/logs (default: INFO)',
    )
    return parser


def read_sources(path: str) -> list[str]:
    """Read one source per line, skipping blanks and comments."""
    with open(path, encoding='utf-8') as f:
        return [line.strip() for line in f if line.strip() and not line.lstrip().startswith('#')]


def main(argv: list[str] | None = None):  # noqa: C901
    """Main entry point."""
    load_dotenv()
    console = Console(theme=THEME)

    logfire_token = os.getenv('LOGFIRE_TOKEN')
    if logfire_token:
        logfire.configure(token=logfire_token, service_name='quizcrawl')

    args = build_parser().parse_args(argv)
    log_file = setup_local_logging(args.log_level)
    console.print(f'[info]Logging to {log_file}[/info]')

    config = None
    if args.config:
        try:
            config = load_config_file(args.config)
        except QuizCrawlError as e:
            console.print(f'[danger]{e}[/danger]')
            sys.exit(1)

    storage = SelectorStorage(content_dir=args.output)

    if args.save_config:
        if config is None:
            console.print('[danger]--save-config requires --config[/danger]')
            sys.exit(1)
        filepath = storage.save_config(args.save_config, config)
        console.print(f'[success]✓ Saved selectors to: {filepath}[/success]')

    if args.list_configs:
        with ExtractionPipeline(storage=storage, embed_images=False, console=console) as pipeline:
            pipeline.show_summary()
        return

    sources = [*args.url, *args.html]
    if args.file:
        if not os.path.exists(args.file):
            console.print(f'[danger]File not found: {args.file}[/danger]')
            sys.exit(1)
        sources.extend(read_sources(args.file))

    if not sources:
        if args.save_config:
            return
        console.print('[danger]No sources provided (use --url, --html or --file)[/danger]')
        sys.exit(1)

    if args.limit:
        sources = sources[: args.limit]
        console.print(f'[info]Limiting to first {args.limit} sources[/info]')

    with ExtractionPipeline(
        storage=storage, embed_images=not args.no_images, timeout=args.timeout, console=console
    ) as pipeline:
        if args.show:
            show_sources(pipeline, sources, config, args.format, save=not args.no_save)
            return
        results = pipeline.process_sources(sources, config, args.format, save=not args.no_save)

    console.print(
        f'[success]{len(results["successful"])} succeeded[/success], [danger]{len(results["failed"])} failed[/danger]'
    )
    if results['failed']:
        sys.exit(1)


def show_sources(
    pipeline: ExtractionPipeline,
    sources: list[str],
    config: SelectorConfig | None,
    output_format: str,
    save: bool,
):
    """Process each source and print a table of its questions."""
    for source in sources:
        try:
            if source.startswith(('http://', 'https://')):
                questions = pipeline.process_url(source, config, output_format, save=save)
            else:
                questions = pipeline.process_file(source, config, output_format=output_format, save=save)
        except (QuizCrawlError, OSError) as e:
            pipeline.console.print(f'[danger]Error processing {source}: {e}[/danger]')
            continue
        if questions:
            pipeline.show_questions(questions)


if __name__ == '__main__':
    main()
