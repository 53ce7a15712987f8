# main.py
from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from debug import COMPONENTS, Debug
from errors import EnigmaError
from machine import Machine
from suites import DEFAULT_SUITE, SUITES
from utilities import format_message, parse_config, read_config, setup_machine

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()


@dataclass(slots=True)
class Config:
    """Runtime switches for the message pipeline."""

    block: int = 5                  # display group size
    settings_marker: str = "*"      # first character of a settings line


# ────────────────────────────────────────────────────────────────────────
#  1. Message processing
# ────────────────────────────────────────────────────────────────────────


def process(machine: Machine, lines: Iterable[str], out: TextIO, cfg: Config) -> None:
    """Apply settings lines to *machine* and write every converted message
    line to *out* in groups of ``cfg.block``.

    Lines ahead of the first settings line must be blank and are echoed as
    blank lines.
    """
    started = False
    for raw in lines:
        line = raw.rstrip("\r\n")
        stripped = line.strip()
        if stripped.startswith(cfg.settings_marker):
            setup_machine(machine, stripped[len(cfg.settings_marker):])
            started = True
        elif not started:
            if stripped:
                raise EnigmaError("bad input: message before any settings line")
            out.write("\n")
        else:
            out.write(format_message(machine.convert_message(line), cfg.block) + "\n")

    if not started:
        raise EnigmaError("bad input: no settings line")


def load_machine(config: str | None, suite: str) -> Machine:
    if config is None:
        debug.log("config", f"using built-in suite {SUITES[suite]['name']}")
        return parse_config(SUITES[suite]["config"])
    return read_config(config)


# ────────────────────────────────────────────────────────────────────────
#  2. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt messages with a rotor machine")
    p.add_argument("config", nargs="?", metavar="CONFIG", help="Machine description (text, or .json). Default: built-in suite.")
    p.add_argument("input", nargs="?", metavar="INPUT", help="Message file. Default: standard input.")
    p.add_argument("output", nargs="?", metavar="OUTPUT", help="Output file. Default: standard output.")
    p.add_argument("--suite", choices=sorted(SUITES), default=DEFAULT_SUITE, help=f"Built-in machine when CONFIG is omitted. Default: {DEFAULT_SUITE}")
    p.add_argument("--block", type=int, default=5, help="Output group size. Default: 5")
    p.add_argument("--debug", nargs="+", choices=COMPONENTS, default=[], metavar="COMPONENT", help=f"Log these components: {', '.join(COMPONENTS)}")
    p.add_argument("--log-file", metavar="FILE", help="Also write debug log to FILE.")
    return p.parse_args(argv)


# ────────────────────────────────────────────────────────────────────────
#  3. Main entry point
# ────────────────────────────────────────────────────────────────────────


def run(args: argparse.Namespace) -> None:
    if args.log_file:
        Debug(log_to=args.log_file)
    if args.debug:
        debug.enable(*args.debug)

    cfg = Config(block=args.block)
    if cfg.block < 1:
        raise EnigmaError(f"Group size must be positive, got {cfg.block}")

    machine = load_machine(args.config, args.suite)

    if args.input:
        try:
            lines = Path(args.input).read_text(encoding="utf-8").splitlines()
        except OSError:
            raise EnigmaError(f"could not open {args.input}") from None
    else:
        lines = sys.stdin.read().splitlines()

    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as out:
                process(machine, lines, out, cfg)
        except OSError:
            raise EnigmaError(f"could not open {args.output}") from None
    else:
        process(machine, lines, sys.stdout, cfg)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        run(args)
    except EnigmaError as e:
        sys.exit(f"Error: {e}")


if __name__ == "__main__":
    main()
