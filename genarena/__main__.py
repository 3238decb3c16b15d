"""
genarena/__main__.py
Interactive shell for poking at an Arena of strings.

Usage:
    python -m genarena              # start the shell
    python -m genarena --verbose    # also log slot growth / rollbacks

Commands:
    insert <text>           store text, print its handle
    remove <handle>         remove and print the value
    get <handle>            print the value
    set <handle> <text>     replace the value
    list / rlist            live entries, ascending / descending
    len                     number of live entries
    .help                   show help
    .quit                   exit (also: exit, quit, .exit)

Handles are typed the way they print: `3` or `(3-1)`.
"""

from __future__ import annotations
import argparse
import logging
import sys

from genarena.arena import Arena, StaleHandleError
from genarena.handle import Handle

HELP = """
Commands:
  insert <text>         Store text, print its handle
  remove <handle>       Remove and print the value
  get <handle>          Print the value
  set <handle> <text>   Replace the value
  list                  Live entries, ascending slot order
  rlist                 Live entries, descending slot order
  len                   Number of live entries
  .help                 Show this help
  .quit                 Exit  (also: exit, quit, .exit)

Handles are written as they print: 3, (3-1)
"""


class CommandError(Exception):
    """Malformed shell command."""


# ── ASCII table formatter ─────────────────────────────────────────────

def _fmt_table(rows: list[tuple[Handle, str]]) -> str:
    if not rows:
        return "(0 entries)"
    cols = ("handle", "value")
    str_rows = [(str(h), v) for h, v in rows]
    widths = [max(len(cols[i]), *(len(r[i]) for r in str_rows)) for i in range(2)]

    sep = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    header = "|" + "|".join(f" {c:<{w}} " for c, w in zip(cols, widths)) + "|"
    lines = [sep, header, sep]
    for r in str_rows:
        lines.append("|" + "|".join(f" {c:<{w}} " for c, w in zip(r, widths)) + "|")
    lines.append(sep)
    lines.append(f"({len(rows)} entr{'ies' if len(rows) != 1 else 'y'})")
    return "\n".join(lines)


# ── Command dispatch ──────────────────────────────────────────────────

def _resolve(arena: Arena[str], text: str) -> Handle[str] | None:
    """Return the live handle whose display form is `text`, or None."""
    for handle in arena.indices():
        if str(handle) == text:
            return handle
    return None


def execute(arena: Arena[str], line: str) -> str:
    """Run one shell command against arena and return the text to print."""
    parts = line.strip().split(maxsplit=1)
    if not parts:
        return ""
    cmd = parts[0].lower()
    rest = parts[1] if len(parts) > 1 else ""

    if cmd == "insert":
        if not rest:
            raise CommandError("usage: insert <text>")
        return str(arena.insert(rest))
    if cmd == "len":
        return str(len(arena))
    if cmd == "list":
        return _fmt_table(list(arena.iter()))
    if cmd == "rlist":
        return _fmt_table(list(reversed(arena)))

    if cmd in ("remove", "get", "set"):
        if not rest:
            raise CommandError(f"usage: {cmd} <handle>")
        target, _, text = rest.partition(" ")
        handle = _resolve(arena, target)
        if handle is None:
            return "not found"
        if cmd == "remove":
            return repr(arena.remove(handle))
        if cmd == "get":
            return repr(arena[handle])
        if not text:
            raise CommandError("usage: set <handle> <text>")
        arena[handle] = text
        return "OK"

    raise CommandError(f"Unknown command: {cmd}")


# ── Shell loop ────────────────────────────────────────────────────────

def run_shell(arena: Arena[str]) -> None:
    print("genarena shell  Type .help for help, exit or .quit to exit.")
    print()

    while True:
        try:
            line = input("arena> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        stripped = line.strip()
        if stripped.lower() in ("exit", "quit", ".exit", ".quit"):
            print("Bye!")
            return
        if stripped == ".help":
            print(HELP)
            continue

        try:
            output = execute(arena, stripped)
        except (CommandError, StaleHandleError) as e:
            print(f"Error: {e}")
            continue
        if output:
            print(output)


# ── Entry point ───────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="python -m genarena", description="genarena interactive shell")
    parser.add_argument("--verbose", action="store_true",
                        help="Log slot-lifecycle events at DEBUG level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    run_shell(Arena())


if __name__ == "__main__":
    main()
