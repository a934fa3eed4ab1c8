"""Command-line access to a running Orbit service's reflections.

Examples:
    orbit-reflect list
    orbit-reflect add --wins "shipped" --challenges "tired" --journal "ok day" --mood 7 --energy 40
    orbit-reflect trends --days 14
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence

from pydantic import BaseModel

from orbit.client import HttpTransport, OrbitClientError, ReflectionClient
from orbit.client.reflections import DEFAULT_TREND_DAYS
from orbit.config import get_client_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orbit-reflect",
        description="Read and write Orbit reflections.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log requests and cache activity to stderr",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all reflections, newest first")

    add = sub.add_parser("add", help="Record a new reflection")
    add.add_argument("--wins", required=True)
    add.add_argument("--challenges", required=True)
    add.add_argument("--journal", required=True, help="Journal entry text")
    add.add_argument("--mood", type=int, required=True, help="Mood, 1-10")
    add.add_argument("--energy", type=int, required=True, help="Energy, 0-100")
    add.add_argument("--tag", action="append", default=[], dest="tags", help="Repeatable")

    show = sub.add_parser("show", help="Show one reflection")
    show.add_argument("id")

    delete = sub.add_parser("delete", help="Delete a reflection")
    delete.add_argument("id")

    trends = sub.add_parser("trends", help="Mood and energy over recent days")
    trends.add_argument(
        "--days",
        type=int,
        default=DEFAULT_TREND_DAYS,
        help=f"Window size in days (default: {DEFAULT_TREND_DAYS})",
    )
    return parser


def _dump(result: BaseModel | list[BaseModel]) -> str:
    if isinstance(result, list):
        data = [item.model_dump(mode="json", by_alias=True) for item in result]
    else:
        data = result.model_dump(mode="json", by_alias=True)
    return json.dumps(data, indent=2)


async def run(args: argparse.Namespace, client: ReflectionClient) -> int:
    try:
        if args.command == "list":
            result = await client.list()
        elif args.command == "add":
            result = await client.create(
                wins=args.wins,
                challenges=args.challenges,
                journal_entry=args.journal,
                mood=args.mood,
                energy=args.energy,
                tags=args.tags,
            )
        elif args.command == "show":
            result = await client.get_by_id(args.id)
        elif args.command == "delete":
            result = await client.remove(args.id)
        else:
            result = await client.get_mood_trends(days=args.days)
    except OrbitClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(_dump(result))
    return 0


async def _main_async(args: argparse.Namespace) -> int:
    transport = HttpTransport.from_settings(get_client_settings())
    try:
        return await run(args, ReflectionClient(transport))
    finally:
        await transport.close()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_main_async(args))


if __name__ == "__main__":
    sys.exit(main())
