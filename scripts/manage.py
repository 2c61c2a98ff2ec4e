"""Operator commands for template workout data.

    python -m scripts.manage seed-template
    python -m scripts.manage clone-user <user_id>
    python -m scripts.manage list-exercises [<user_id>]
"""

import argparse
import asyncio
import sys

from config.settings import settings
from models.database import close_mongo_connection, connect_to_mongo, get_workouts_collection
from services.seeding import clone_template_user, seed_template_exercises
from services.workout_service import list_exercises
from utils.exceptions import AppError
from utils.logger import quiet_noisy_loggers, setup_logger

logger = setup_logger(__name__)


async def run_seed_template(args) -> None:
    added = await seed_template_exercises(get_workouts_collection(), args.template)
    print(f"Added {added} template exercise(s) for '{args.template or settings.demo_user_id}'")


async def run_clone_user(args) -> None:
    inserted = await clone_template_user(get_workouts_collection(), args.user_id, args.template)
    print(f"Seeded {len(inserted)} session(s) for user '{args.user_id}'")


async def run_list_exercises(args) -> None:
    user_id = args.user_id or settings.demo_user_id
    rows = await list_exercises(get_workouts_collection(), user_id)
    print(f"Found {len(rows)} exercises for user {user_id}:")
    for index, row in enumerate(rows, start=1):
        print(f"\n{index}. {row['name']} ({row['muscleGroup']})")
        print(f"   ID: {row['id']}")
        print(f"   Stats: {row['statsCount']} entries")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage template workout data")
    parser.add_argument(
        "--template",
        default=None,
        help=f"Template user id (default: {settings.demo_user_id})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    seed = subparsers.add_parser("seed-template", help="Add demo exercises to the template user")
    seed.set_defaults(handler=run_seed_template)

    clone = subparsers.add_parser("clone-user", help="Copy the template user's workouts to a user")
    clone.add_argument("user_id", help="Target user id")
    clone.set_defaults(handler=run_clone_user)

    listing = subparsers.add_parser("list-exercises", help="List a user's exercises")
    listing.add_argument("user_id", nargs="?", default=None, help="User id (default: template user)")
    listing.set_defaults(handler=run_list_exercises)

    return parser


async def run(args) -> None:
    await connect_to_mongo()
    try:
        await args.handler(args)
    finally:
        await close_mongo_connection()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    quiet_noisy_loggers()
    try:
        asyncio.run(run(args))
    except AppError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error(f"Command {args.command} failed: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
