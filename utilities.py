# utilities.py
from __future__ import annotations

import json
from pathlib import Path
from typing import List, Tuple

from alphabet import Alphabet
from debug import Debug
from errors import EnigmaError
from machine import BLANK, Machine
from permutation import Permutation
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector, Rotor

debug = Debug()

# ────────────────────────────────────────────────────────────────────────
#  0. Wheel construction
# ────────────────────────────────────────────────────────────────────────


def make_rotor(name: str, description: str, cycles: str, alphabet: Alphabet) -> Rotor:
    """Build one rotor from its type tag: ``M<notches>``, ``N`` or ``R``."""
    perm = Permutation(cycles, alphabet)
    kind, notches = description[:1], description[1:]
    if kind == "M":
        return MovingRotor(name, perm, notches)
    if kind == "N" and not notches:
        return FixedRotor(name, perm)
    if kind == "R" and not notches:
        return Reflector(name, perm)
    raise EnigmaError(f"Bad rotor description {description!r} for {name}")


def _check_alphabet(chars: str) -> Alphabet:
    if not chars:
        raise EnigmaError("Configuration has an empty alphabet")
    if any(ch.isspace() for ch in chars):
        raise EnigmaError("Alphabet may not contain whitespace")
    return Alphabet(chars)


# ────────────────────────────────────────────────────────────────────────
#  1. Machine descriptions
# ────────────────────────────────────────────────────────────────────────


def parse_config(text: str) -> Machine:
    """Return a Machine described by the text format.

    Line 1 is the alphabet; then the slot and pawl counts; then one wheel per
    ``name tag (cycles)...`` group, the cycles possibly running onto later
    lines.
    """
    first, _, rest = text.partition("\n")
    alphabet = _check_alphabet(first.strip())
    tokens = rest.split()

    if len(tokens) < 2:
        raise EnigmaError("Configuration file truncated")
    try:
        num_rotors, pawls = int(tokens[0]), int(tokens[1])
    except ValueError:
        raise EnigmaError(f"Bad rotor/pawl counts {tokens[0]!r} {tokens[1]!r}") from None

    wheels: List[Rotor] = []
    i = 2
    while i < len(tokens):
        if i + 1 >= len(tokens):
            raise EnigmaError(f"Bad rotor description for {tokens[i]!r}")
        name, description = tokens[i], tokens[i + 1]
        i += 2
        cycles: List[str] = []
        while i < len(tokens) and tokens[i].startswith("(") and tokens[i].endswith(")"):
            cycles.append(tokens[i])
            i += 1
        wheels.append(make_rotor(name, description, " ".join(cycles), alphabet))
        debug.log("config", f"wheel {wheels[-1]!r}")

    return Machine(alphabet, num_rotors, pawls, wheels)


def parse_json_config(data: dict) -> Machine:
    """Return a Machine from a JSON description.

    ``{"alphabet": ..., "rotors": 5, "pawls": 3, "wheels": [{"name": ...,
    "type": "M", "notches": "Q", "cycles": "(AB) ..."}]}``
    """
    if not isinstance(data, dict):
        raise EnigmaError(f"Config must be a JSON object, not {type(data).__name__}")
    required = {"alphabet", "rotors", "pawls", "wheels"}
    missing = required - data.keys()
    if missing:
        raise EnigmaError(f"Missing keys in config: {', '.join(sorted(missing))}")
    if not isinstance(data["alphabet"], str):
        raise EnigmaError("Config 'alphabet' must be a string")
    if not isinstance(data["wheels"], list):
        raise EnigmaError("Config 'wheels' must be a list")

    alphabet = _check_alphabet(data["alphabet"])
    wheels: List[Rotor] = []
    for wheel in data["wheels"]:
        if not isinstance(wheel, dict):
            raise EnigmaError(f"Wheel entry {wheel!r} must be an object")
        try:
            name, kind = wheel["name"], wheel["type"]
        except KeyError as e:
            raise EnigmaError(f"Wheel entry missing {e.args[0]!r}") from None
        notches, cycles = wheel.get("notches", ""), wheel.get("cycles", "")
        for key, value in (("name", name), ("type", kind), ("notches", notches), ("cycles", cycles)):
            if not isinstance(value, str):
                raise EnigmaError(f"Wheel {key} {value!r} must be a string")
        description = kind + notches if kind == "M" else kind
        wheels.append(make_rotor(name, description, cycles, alphabet))

    try:
        num_rotors, pawls = int(data["rotors"]), int(data["pawls"])
    except (TypeError, ValueError):
        raise EnigmaError(f"Bad rotor/pawl counts {data['rotors']!r} {data['pawls']!r}") from None
    return Machine(alphabet, num_rotors, pawls, wheels)


def read_config(path: str | Path) -> Machine:
    """Load a machine description from *path* (``.json`` or text format)."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        raise EnigmaError(f"could not open {path}") from None

    debug.log("config", f"reading {path}")
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise EnigmaError(f"Bad JSON in {path}: {e}") from None
        return parse_json_config(data)
    return parse_config(text)


# ────────────────────────────────────────────────────────────────────────
#  2. Per-message settings
# ────────────────────────────────────────────────────────────────────────


def split_settings(settings: str, num_rotors: int) -> Tuple[List[str], str, str | None, str]:
    """Split a settings line (without the leading ``*``) into
    ``(rotor_names, setting, rings_or_None, plugboard_cycles)``."""
    pos = settings.find("(")
    plug = ""
    if pos != -1:
        settings, plug = settings[:pos], settings[pos:]

    tokens = settings.split()
    if not num_rotors + 1 <= len(tokens) <= num_rotors + 2:
        raise EnigmaError(f"Bad settings line {settings.strip()!r}")

    names = tokens[:num_rotors]
    setting = tokens[num_rotors]
    rings = tokens[num_rotors + 1] if len(tokens) == num_rotors + 2 else None
    return names, setting, rings, plug


def setup_machine(machine: Machine, settings: str) -> None:
    """Configure *machine* from a settings line; unspecified rings reset to 0.

    The whole line is checked before the machine changes, so a rejected line
    leaves the previous configuration in place.
    """
    names, setting, rings, plug = split_settings(settings, machine.num_rotors)
    if rings is None:
        rings = machine.alphabet.to_char(0) * (machine.num_rotors - 1)

    plugboard = Permutation(plug, machine.alphabet)
    machine.check_per_slot("Setting", setting)
    machine.check_per_slot("Ring setting", rings)

    machine.insert_rotors(names)
    machine.set_rotors(setting)
    machine.set_rings(rings)
    machine.set_plugboard(plugboard)
    debug.log("config", f"setup {machine!r} key={setting} rings={rings}")


# ────────────────────────────────────────────────────────────────────────
#  3. Output formatting
# ────────────────────────────────────────────────────────────────────────


def format_message(msg: str, block: int = 5) -> str:
    """Drop blanks and print *msg* in groups of *block* characters."""
    text = msg.replace(BLANK, "")
    return " ".join(text[i : i + block] for i in range(0, len(text), block))


__all__ = [
    "make_rotor",
    "parse_config",
    "parse_json_config",
    "read_config",
    "split_settings",
    "setup_machine",
    "format_message",
]
