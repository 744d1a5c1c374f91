from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Iterable, List, Optional

from . import __version__
from .containers.displays import Display
from .engine.session import SupermarketSession
from .exceptions import SupermarketError
from .geometry import Direction
from .settings import Settings

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Commands: n|e|s|w (move), face <dir>, interact, take <slot>, return <item>, "
    "checkout, search <text>, inventory, where, map, help, quit"
)


def _setup_logging(verbosity: int, default: str = "WARNING") -> None:
    level = getattr(logging, default.upper(), logging.WARNING)
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def _display_in_front(session: SupermarketSession) -> Optional[Display]:
    amenity = session.amenity_in_front_of()
    return amenity if isinstance(amenity, Display) else None


def _parse_index(text: str) -> Optional[int]:
    try:
        return int(text)
    except ValueError:
        return None


def _where(session: SupermarketSession) -> str:
    snap = session.snapshot()
    ahead = session.amenity_in_front_of()
    carrying = snap.equipment or "hands"
    return (
        f"{snap.name} at {snap.position} on {snap.floor_name}, facing {snap.facing.name.lower()}; "
        f"ahead: {ahead.label if ahead is not None else 'nothing'}; "
        f"carrying {len(snap.products)} item(s) in {carrying}."
    )


def _inventory(session: SupermarketSession) -> str:
    rows = session.inventory()
    if not rows:
        return "You are not carrying anything."
    lines = [str(row) for row in rows]
    lines.append(f"Running total: PHP {session.snapshot().running_total:.2f}")
    return "\n".join(lines)


def _search(session: SupermarketSession, text: str) -> str:
    found = session.search_products(text)
    if not found:
        return f"No display carries {text!r}."
    return "\n".join(f"{d.label} at {d.address}" for d in found)


def _take(session: SupermarketSession, arg: str) -> str:
    display = _display_in_front(session)
    if display is None:
        return "There is no display in front of you."
    index = _parse_index(arg)
    if index is None:
        return "Usage: take <slot number>"
    return session.take_product(display, index).message


def _return(session: SupermarketSession, arg: str) -> str:
    display = _display_in_front(session)
    if display is None:
        return "There is no display in front of you."
    index = _parse_index(arg)
    products = session.snapshot().products
    if index is None or not 0 <= index < len(products):
        return f"Usage: return <item number 0-{max(len(products) - 1, 0)}>"
    return session.return_product(display, products[index]).message


def handle_command(session: SupermarketSession, line: str) -> str:
    """Run one text command against the session and return what to print."""
    verb, _, arg = line.strip().partition(" ")
    verb, arg = verb.lower(), arg.strip()
    if not verb:
        return ""
    if verb in ("n", "e", "s", "w", "north", "east", "south", "west"):
        return session.move(Direction.parse(verb)).message
    if verb == "face":
        try:
            direction = Direction.parse(arg)
        except ValueError:
            return "Usage: face <north|east|south|west>"
        return session.face(direction).message
    if verb == "interact":
        return session.interact_with_tile_in_front().message
    if verb == "take":
        return _take(session, arg)
    if verb == "return":
        return _return(session, arg)
    if verb == "checkout":
        return session.checkout().message
    if verb == "search":
        return _search(session, arg) if arg else "Usage: search <text>"
    if verb == "inventory":
        return _inventory(session)
    if verb == "where":
        return _where(session)
    if verb == "map":
        snap = session.snapshot()
        return "\n".join(session.store.to_lines(snap.floor, marker=snap.position))
    if verb == "help":
        return HELP_TEXT
    return f"Unknown command {verb!r}. {HELP_TEXT}"


def run(session: SupermarketSession, lines: Iterable[str], out: Callable[[str], None] = print) -> int:
    """Feed commands to the session until ``quit``, end of input, or the shopper leaves."""
    for line in lines:
        if line.strip().lower() in ("quit", "q", "exit"):
            break
        text = handle_command(session, line)
        if text:
            out(text)
        if session.is_over:
            break
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="supermarket-sim",
        description="Supermarket simulator - text driver",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--name", default="Shopper", help="Shopper name")
    parser.add_argument("--age", type=int, default=30, help="Shopper age")
    parser.add_argument("--settings", default=None, help="Path to a YAML settings file")
    parser.add_argument("--receipt-dir", default=None, help="Directory for receipt files")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")

    args = parser.parse_args(argv)
    if args.age < 0:
        parser.error("--age cannot be negative")

    try:
        settings = Settings.load(args.settings)
    except SupermarketError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    _setup_logging(args.verbose, settings.log_level)

    # Honor CLI over settings file and env vars
    if args.receipt_dir:
        settings.receipt_dir = args.receipt_dir

    try:
        session = SupermarketSession.start(args.name, args.age, settings)
    except SupermarketError as e:
        logger.error("Could not build the supermarket: %s", e)
        return 2

    print(f"Welcome, {args.name}! {HELP_TEXT}")
    return run(session, sys.stdin)


if __name__ == "__main__":
    sys.exit(main())
