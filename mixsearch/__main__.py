"""
Command line entry point.

    python -m mixsearch tokenize "VideoEditEngine2026 图书馆" --mode query
    python -m mixsearch build
    python -m mixsearch search "机器学习" --scope local --top-k 5

build/search use PostgreSQL + GCS from the environment (.env.local / .env).
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, Sequence

from .config import Settings, load_env
from .logging_config import setup_logging
from .service import create_service
from .tokenizer import DOCUMENT_MODE, QUERY_MODE, TokenizeOptions, tokenize

logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mixsearch",
        description="Mixed Latin/CJK full-text index and hybrid search",
    )
    parser.add_argument(
        "--log-file",
        default="logs/mixsearch.log",
        help="Base path of the session log file (default: logs/mixsearch.log)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    tokenize_parser = subparsers.add_parser("tokenize", help="Print tokens for a text")
    tokenize_parser.add_argument("text")
    tokenize_parser.add_argument("--mode", choices=[DOCUMENT_MODE, QUERY_MODE], default=DOCUMENT_MODE)
    tokenize_parser.add_argument("--stats", action="store_true", help="Print TF map and lengths")

    subparsers.add_parser("build", help="Rebuild the index from every document")

    search_parser = subparsers.add_parser("search", help="Run a hybrid search")
    search_parser.add_argument("query")
    search_parser.add_argument("--scope", default="all", help='"local", "remote" or "all" (default: all)')
    search_parser.add_argument("--alpha", type=float, help="Lexical weight in [0, 1]")
    search_parser.add_argument("--no-embedding", action="store_true", help="Lexical scoring only")
    search_parser.add_argument("--top-k", type=int, help="Maximum results")
    return parser


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _run_tokenize(args) -> int:
    options = TokenizeOptions(mode=args.mode)
    if args.stats:
        stats = tokenize(args.text, options, output="stats")
        _print_json({
            "tokens": stats.tokens,
            "tf": stats.tf,
            "length": stats.length,
            "unique_terms": stats.unique_terms,
        })
    else:
        _print_json(tokenize(args.text, options))
    return 0


async def _run_service(args, settings: Settings) -> int:
    service = create_service(settings)
    await service.start()
    try:
        if args.command == "build":
            response = await service.build_index()
            _print_json(response.model_dump())
            return 0 if response.success else 1

        response = await service.search(
            args.query,
            scope=args.scope,
            alpha=args.alpha,
            use_embedding=False if args.no_embedding else None,
            top_k=args.top_k,
        )
        _print_json(response.model_dump())
        return 0 if response.error is None else 1
    finally:
        await service.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_argument_parser().parse_args(argv)

    load_env()
    settings = Settings()
    setup_logging(
        log_file=args.log_file,
        console_level=settings.console_log_level,
        file_level=logging.DEBUG  # Always DEBUG in file for troubleshooting
    )

    if args.command == "tokenize":
        return _run_tokenize(args)
    return asyncio.run(_run_service(args, settings))


if __name__ == "__main__":
    sys.exit(main())
