"""Command-line interface for dinner-guests."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

import structlog

from .config import get_settings
from .roster import RequestContext
from .service import DinnerGuestsService
from .utils.logging import configure_logging

logger = structlog.get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Dinner guests enrichment tool")
    parser.add_argument("--log-level", help="Override the configured log level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    facts = subparsers.add_parser("facts", help="Extract facts from a biography text file")
    facts.add_argument("subject", help="Subject name")
    facts.add_argument("input", help="Path to biography text ('-' for stdin)")

    lookup = subparsers.add_parser("lookup", help="Look up a person's biography and extract facts")
    lookup.add_argument("subject", help="Subject name")

    suggest = subparsers.add_parser("suggest", help="Autocomplete person names")
    suggest.add_argument("query", help="Partial name")

    material = subparsers.add_parser("material", help="Aggregate quotes, works and excerpts")
    material.add_argument("subjects", nargs="+", help="Subject names")

    guests = subparsers.add_parser("guests", help="Register custom guests and aggregate their material")
    guests.add_argument("names", nargs="+", help="Guest names")

    segment = subparsers.add_parser("segment", help="Split generated dialogue into speaker turns")
    segment.add_argument("input", help="Path to generated text ('-' for stdin)")

    return parser.parse_args(argv)


def read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = parse_args(argv)
    configure_logging(args.log_level)

    async with DinnerGuestsService(get_settings()) as service:
        if args.command == "facts":
            facts = service.extract_facts(read_input(args.input), args.subject)
            emit(facts.to_dict())

        elif args.command == "lookup":
            facts = await service.lookup_person(args.subject)
            if facts is None:
                logger.error("No biography found", subject=args.subject)
                return 1
            emit(facts.to_dict())

        elif args.command == "suggest":
            emit([suggestion.to_dict() for suggestion in await service.suggest_subjects(args.query)])

        elif args.command == "material":
            results = await service.aggregate_material(args.subjects)
            emit([entry.bundle.to_dict() for entry in results])

        elif args.command == "guests":
            context = RequestContext()
            added = [await service.add_custom_guest(name, context) for name in args.names]
            results = await service.aggregate_for_guests([guest.id for guest in added], context)
            emit(
                [
                    {"guest": guest.to_dict(), "material": entry.bundle.to_dict()}
                    for guest, entry in zip(added, results)
                ]
            )

        elif args.command == "segment":
            transcript = service.segment_dialogue(read_input(args.input))
            logger.info("Transcript built", turns=len(transcript), speakers=transcript.speakers)
            emit(transcript.to_dict()["turns"])

    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
