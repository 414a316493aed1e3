#!/usr/bin/env python3
from __future__ import annotations

from .core import ActionflowError, resolve_root, scan_commands
from .logging import configure_logging
from .parser import build_parser, build_preparser


def main(argv: list[str] | None = None) -> int:
    known, _ = build_preparser().parse_known_args(argv)
    configure_logging(verbose=known.verbose)
    try:
        found = scan_commands(resolve_root(known.root))
        parser = build_parser(found)
        args = parser.parse_args(argv)
        return int(args.func(args))
    except ActionflowError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    raise SystemExit(main())
