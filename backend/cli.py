"""Command line client: find places nearby, save and browse favorites.

Usage:
    curator find [--type cafe] [--lat 40.7 --lng -73.9] [--save PLACE_ID ...]
    curator saved [--type cafe]
    curator unsave PLACE_ID [--type cafe]
    curator type restaurant
    curator theme
    curator serve [--host 127.0.0.1] [--port 8080]
    curator                      (reopen the last view)
"""

import argparse
import asyncio
import logging
import sys

import config
from controller import CacheGateController, OutcomeStatus
from geolocation import StaticGeolocation, provider_from_env
from nearby_client import NearbyClient
from preferences import PLACE_TYPES, Preferences, empty_saved_message, heading
from saved import SavedRegistry, to_saved
from storage import LibsqlStore, Repository

logger = logging.getLogger(__name__)


def _open_repo(path: str) -> Repository:
    store = LibsqlStore(path)
    store.init()
    return Repository(store)


def _print_heading(place_type: str, view: str) -> None:
    h = heading(place_type, view)
    print(h.title)
    print(h.subtitle)
    print()


def _rating(value: float | None) -> str:
    return "N/A" if value is None else f"{value:g}"


def cmd_find(args: argparse.Namespace, repo: Repository) -> int:
    prefs = Preferences(repo)
    if args.type:
        prefs.current_type = args.type
    place_type = prefs.current_type
    prefs.view_mode = "find"
    _print_heading(place_type, "find")

    if args.lat is not None and args.lng is not None:
        geolocation = StaticGeolocation(args.lat, args.lng)
    else:
        geolocation = provider_from_env()
    client = NearbyClient(args.api_url)
    controller = CacheGateController(repo, geolocation, client)

    outcome = asyncio.run(controller.find(place_type))
    if outcome.status is OutcomeStatus.DROPPED:
        print("A search is already running, try again in a moment.")
        return 1
    if outcome.status is not OutcomeStatus.RESULTS:
        print(outcome.message)
        return 0 if outcome.status is OutcomeStatus.EMPTY else 1

    for i, place in enumerate(outcome.places, 1):
        print(f"{i:2}. {place.name}  ⭐ {_rating(place.rating)}")
        if place.address:
            print(f"    {place.address}")
        print(f"    id: {place.id}")
        photo = client.photo_url(place)
        if photo:
            print(f"    photo: {photo}")
    if outcome.from_cache:
        print("\n(cached results)")

    registry = SavedRegistry(repo)
    by_id = {p.id: p for p in outcome.places}
    for place_id in args.save or []:
        place = by_id.get(place_id)
        if place is None:
            print(f"{place_id} is not in these results.")
        elif registry.add(place_type, to_saved(place, client.photo_url(place))):
            print(f"{place.name} saved to {place_type}!")
        else:
            print(f"{place.name} is already saved in {place_type}.")
    return 0


def cmd_saved(args: argparse.Namespace, repo: Repository) -> int:
    prefs = Preferences(repo)
    if args.type:
        prefs.current_type = args.type
    place_type = prefs.current_type
    prefs.view_mode = "saved"
    _print_heading(place_type, "saved")

    items = SavedRegistry(repo).list(place_type)
    if not items:
        print(empty_saved_message(place_type))
        return 0
    for i, rec in enumerate(items, 1):
        print(f"{i:2}. {rec.name}  ⭐ {_rating(rec.rating)}  (id: {rec.id})")
    return 0


def cmd_unsave(args: argparse.Namespace, repo: Repository) -> int:
    place_type = args.type or Preferences(repo).current_type
    SavedRegistry(repo).remove(place_type, args.place_id)
    print(f"Removed {args.place_id} from saved {place_type}.")
    return 0


def cmd_type(args: argparse.Namespace, repo: Repository) -> int:
    Preferences(repo).current_type = args.name
    print(heading(args.name, "find").title)
    return 0


def cmd_theme(args: argparse.Namespace, repo: Repository) -> int:
    mode = Preferences(repo).toggle_theme()
    print("🌙 Dark mode" if mode == "dark" else "☀️ Light mode")
    return 0


def cmd_resume(args: argparse.Namespace, repo: Repository) -> int:
    """No subcommand: reopen whichever view was used last."""
    prefs = Preferences(repo)
    view = prefs.view_mode
    print(heading(prefs.current_type, view).document_title)
    print()
    if view == "saved":
        args.type = None
        return cmd_saved(args, repo)
    _print_heading(prefs.current_type, "find")
    print("Run `curator find` to search near you.")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("main:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="curator", description="Swipe-to-save place discovery")
    parser.add_argument("--store", default=config.STORE_PATH, help="Path to the local state database")
    parser.add_argument("--api-url", default=config.CURATOR_API_URL, help="Base URL of the proxy")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("find", help="Search places near you")
    p.add_argument("--type", choices=sorted(PLACE_TYPES))
    p.add_argument("--lat", type=float)
    p.add_argument("--lng", type=float)
    p.add_argument("--save", nargs="*", metavar="PLACE_ID", help="Save these results")
    p.set_defaults(func=cmd_find)

    p = sub.add_parser("saved", help="List saved places")
    p.add_argument("--type", choices=sorted(PLACE_TYPES))
    p.set_defaults(func=cmd_saved)

    p = sub.add_parser("unsave", help="Remove a saved place")
    p.add_argument("place_id")
    p.add_argument("--type", choices=sorted(PLACE_TYPES))
    p.set_defaults(func=cmd_unsave)

    p = sub.add_parser("type", help="Set the current place type")
    p.add_argument("name", choices=sorted(PLACE_TYPES))
    p.set_defaults(func=cmd_type)

    p = sub.add_parser("theme", help="Toggle light/dark mode")
    p.set_defaults(func=cmd_theme)

    p = sub.add_parser("serve", help="Run the proxy server")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=config.PORT)
    p.set_defaults(func=cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "serve":
        return cmd_serve(args)
    if args.command is None:
        return cmd_resume(args, _open_repo(args.store))
    return args.func(args, _open_repo(args.store))


if __name__ == "__main__":
    sys.exit(main())
