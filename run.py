"""Entry point for the Landmark RAG application."""

import argparse
import logging
import sys

from src.config import MARKDOWN_HEADING_PATTERN, AppConfig, load_config
from src.models.index_report import IndexReport
from src.services import build_services


def configure_logging(config: AppConfig) -> None:
    logging.basicConfig(level=config.logging.level.upper(), format=config.logging.format)


def _positive_int(value: str) -> int:
    k = int(value)
    if k <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return k


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Index landmark articles and ask questions about them.")
    parser.add_argument("--config", default="config.yaml", help="Path to the YAML config file.")
    commands = parser.add_subparsers(dest="command", required=True)

    wiki = commands.add_parser("index-wikipedia", help="Index Wikipedia articles by title.")
    wiki.add_argument("titles", nargs="+")
    wiki.add_argument("--intro-only", action="store_true", help="Only index the lead section.")

    pdf = commands.add_parser("index-pdf", help="Index a local PDF file.")
    pdf.add_argument("path")
    mode = pdf.add_mutually_exclusive_group()
    mode.add_argument("--by-page", action="store_true", help="One document per page.")
    mode.add_argument(
        "--separator",
        nargs="?",
        const=MARKDOWN_HEADING_PATTERN,
        help="Split on a heading pattern (default: markdown '## ' headings).",
    )

    search = commands.add_parser("search", help="Show the top matching chunks for a query.")
    search.add_argument("query")
    search.add_argument("-k", type=_positive_int, default=None, help="Number of chunks to show.")

    ask = commands.add_parser("ask", help="Answer a question from the indexed chunks.")
    ask.add_argument("question")

    return parser


def _print_report(report: IndexReport) -> None:
    print(
        f"Indexed {report.indexed_documents} documents ({report.indexed_chunks} chunks), "
        f"skipped {report.skipped_documents}, failed {len(report.failures)}"
    )
    for failure in report.failures:
        print(f"  FAILED {failure.item}: {failure.error}")


def main(argv: list[str] | None = None) -> int:
    """Run one CLI command and return the process exit code."""
    args = build_arg_parser().parse_args(argv)
    config = load_config(args.config)
    configure_logging(config)

    with build_services(config) as services:
        if args.command == "index-wikipedia":
            report = services.index_builder.build_from_wikipedia(
                args.titles, services.wikipedia, full=not args.intro_only
            )
            _print_report(report)
            return 1 if report.failures else 0

        if args.command == "index-pdf":
            if args.separator:
                report = services.index_builder.build_from_pdf_with_separator(
                    args.path, services.parser, heading_pattern=args.separator
                )
            else:
                report = services.index_builder.build_from_pdf(
                    args.path, services.parser, parse_by_page=args.by_page
                )
            _print_report(report)
            return 1 if report.failures else 0

        if args.command == "search":
            k = config.retrieval.top_k if args.k is None else args.k
            for rank, chunk in enumerate(services.retriever.find_top_k(args.query, k), start=1):
                print(f"{rank}. {chunk.title} / {chunk.section or '-'} #{chunk.chunk_index} ({chunk.id})")
            return 0

        result = services.question_service().answer_question(args.question)
        print(result.answer.text if result.answer else "Please ask a question.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
