"""Command line interface for shinyhunt."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .backend import SqlHuntStore
from .config import Settings, build_settings, load_config
from .grid import apply_filters, build_roster_frame, group_boxes, search_pokemon, sort_roster
from .helpers import (
    format_dex_number,
    format_probability,
    format_rate,
    serebii_url,
)
from .odds import compute_odds
from .roster import RosterCache
from .sources import pokeapi
from .stats import compute_stats
from .tracker import HuntTracker

logger = logging.getLogger(__name__)


def _settings(args: argparse.Namespace) -> Settings:
    config = load_config(Path(args.config) if args.config else None)
    if args.db:
        config["db_path"] = args.db
    if args.user:
        config["user_id"] = args.user
    return build_settings(config)


def _roster(settings: Settings) -> RosterCache:
    return RosterCache(lambda gen: pokeapi.fetch_roster(gen, batch_size=settings.batch_size))


def _print_odds(settings: Settings, methods: List[str], encounters: int) -> None:
    result = compute_odds(settings.base_odds, settings.methods, methods, encounters)
    print(f"Rate: {format_rate(result.effective_rate)}")
    print(f"Chance so far: {format_probability(result.cumulative_probability)}")


def _cmd_odds(args: argparse.Namespace, settings: Settings) -> None:
    unknown = [m for m in args.method if settings.method(m) is None]
    for method_id in unknown:
        logger.warning("Ignoring unknown shiny method %s", method_id)
    _print_odds(settings, args.method, args.encounters)


def _cmd_methods(args: argparse.Namespace, settings: Settings) -> None:
    for method in settings.methods:
        print(f"{method.id}\t{method.name}\t+{method.rolls} rolls\t{method.description}")


def _cmd_roster(args: argparse.Namespace, settings: Settings) -> None:
    roster = _roster(settings).get(args.generation)
    if not roster:
        print("No Pokémon found.")
        return
    hunts = SqlHuntStore(settings.db_path).read_hunts(settings.user_id or "")
    df = build_roster_frame(roster, hunts)
    df = apply_filters(df, search=args.search)
    df = sort_roster(df, args.sort)
    if df.empty:
        print("No Pokémon found.")
        return
    for title, box in group_boxes(df, search_active=bool(args.search)):
        print(title)
        for row in box.itertuples():
            print(f"  {format_dex_number(row.Number)} {row.Name:<12} {row.Encounters}")


def _cmd_search(args: argparse.Namespace, settings: Settings) -> None:
    matches = search_pokemon(_roster(settings).get(None), args.term)
    if not matches:
        print("No Pokémon found.")
        return
    for pokemon in matches:
        print(f"{format_dex_number(pokemon.id)} {pokemon.name}")


def _cmd_hunt(args: argparse.Namespace, settings: Settings) -> None:
    if not settings.user_id and args.action != "show":
        raise SystemExit("A --user is required to edit hunts")
    tracker = HuntTracker(SqlHuntStore(settings.db_path), settings, settings.user_id)
    pid = args.pokemon_id
    try:
        if args.action == "encounter":
            tracker.change_encounters(pid, args.value)
        elif args.action == "method":
            tracker.toggle_method(pid, args.value, not args.off)
        elif args.action == "notes":
            tracker.set_notes(pid, args.value)
        elif args.action == "location":
            tracker.set_location(pid, args.value)
        elif args.action == "clear":
            tracker.clear(pid)
            print(f"Cleared hunt {format_dex_number(pid)}")
            return
    finally:
        tracker.close()

    hunt = tracker.hunt(pid)
    print(f"{format_dex_number(pid)}  encounters: {hunt.encounters}")
    names = [settings.method(m).name if settings.method(m) else m for m in hunt.methods]
    print(f"Methods: {', '.join(names) or '-'}")
    if hunt.location:
        print(f"Location: {hunt.location}")
    if hunt.notes:
        print(f"Notes: {hunt.notes}")
    _print_odds(settings, hunt.methods, hunt.encounters)
    print(serebii_url(pid))


def _cmd_stats(args: argparse.Namespace, settings: Settings) -> None:
    hunts = SqlHuntStore(settings.db_path).read_hunts(settings.user_id or "")
    stats = compute_stats(hunts.values(), _roster(settings).get(None))
    for label, value in stats.as_rows().items():
        print(f"{label}: {value:,}")
    if stats.luckiest_hunt:
        print(
            f"Luckiest Hunt: {stats.luckiest_hunt.pokemon.name}"
            f" ({stats.luckiest_hunt.encounters:,} encounters)"
        )
    else:
        print("Luckiest Hunt: -")
    print("Top 5 Most Hunted:")
    if not stats.top_hunts:
        print("  No hunts started yet.")
    for i, summary in enumerate(stats.top_hunts, start=1):
        print(f"  #{i} {summary.pokemon.name} {summary.encounters:,}")
    for enc, hunt_count in zip(stats.encounters_by_generation, stats.hunts_by_generation):
        print(f"{enc.name}: {enc.value:,} encounters, {hunt_count.value} hunts")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shiny hunt tracker")
    parser.add_argument("--config", type=str, default=None, help="Path to a JSON config file")
    parser.add_argument("--db", type=str, default=None, help="SQLite file holding hunts")
    parser.add_argument("--user", type=str, default=None, help="User whose hunts to use")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    odds = sub.add_parser("odds", help="Show shiny odds for an encounter count")
    odds.add_argument("--encounters", type=int, default=0)
    odds.add_argument("--method", action="append", default=[], help="Active method id")
    odds.set_defaults(func=_cmd_odds)

    methods = sub.add_parser("methods", help="List shiny hunting methods")
    methods.set_defaults(func=_cmd_methods)

    roster = sub.add_parser("roster", help="List Pokémon in boxes with encounter counts")
    roster.add_argument("--generation", type=int, choices=[1, 2, 3, 4], default=None)
    roster.add_argument("--search", type=str, default=None)
    roster.add_argument(
        "--sort",
        default="id-asc",
        choices=[
            "id-asc",
            "id-desc",
            "name-asc",
            "name-desc",
            "encounters-desc",
            "encounters-asc",
        ],
    )
    roster.set_defaults(func=_cmd_roster)

    search = sub.add_parser("search", help="Find a Pokémon by name")
    search.add_argument("term")
    search.set_defaults(func=_cmd_search)

    hunt = sub.add_parser("hunt", help="Show or update a hunt")
    hunt_sub = hunt.add_subparsers(dest="action", required=True)
    show = hunt_sub.add_parser("show")
    show.add_argument("pokemon_id", type=int)
    encounter = hunt_sub.add_parser("encounter", help="Add (or subtract) encounters")
    encounter.add_argument("pokemon_id", type=int)
    encounter.add_argument("value", type=int, nargs="?", default=1)
    method = hunt_sub.add_parser("method", help="Toggle a shiny method")
    method.add_argument("pokemon_id", type=int)
    method.add_argument("value")
    method.add_argument("--off", action="store_true", help="Disable the method")
    notes = hunt_sub.add_parser("notes")
    notes.add_argument("pokemon_id", type=int)
    notes.add_argument("value")
    location = hunt_sub.add_parser("location")
    location.add_argument("pokemon_id", type=int)
    location.add_argument("value")
    clear = hunt_sub.add_parser("clear")
    clear.add_argument("pokemon_id", type=int)
    hunt.set_defaults(func=_cmd_hunt)

    stats = sub.add_parser("stats", help="Summarise all hunts")
    stats.set_defaults(func=_cmd_stats)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = _parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = _settings(args)
    try:
        args.func(args, settings)
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":  # pragma: no cover
    main()
