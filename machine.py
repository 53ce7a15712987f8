# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Iterable, Sequence

from alphabet import Alphabet
from debug import Debug
from errors import EnigmaError
from permutation import Permutation
from rotor_and_reflector import Rotor

debug = Debug()

BLANK = " "


class Machine:
    """A complete rotor machine.

    *all_rotors* is the pool of available rotors. Slots hold indices into
    that pool, slot 0 being the reflector and the rightmost *pawls* slots
    the moving rotors.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        all_rotors: Iterable[Rotor],
    ) -> None:
        self._pool: tuple[Rotor, ...] = tuple(all_rotors)

        if num_rotors < 2:
            raise EnigmaError(f"Machine needs at least 2 rotor slots, got {num_rotors}")
        if not (0 <= pawls < num_rotors):
            raise EnigmaError(f"Pawl count {pawls} must be in 0–{num_rotors - 1}")
        if num_rotors > len(self._pool):
            raise EnigmaError(
                f"{num_rotors} rotor slots but only {len(self._pool)} rotors available"
            )

        self.alphabet = alphabet
        self._num_rotors = num_rotors
        self._pawls = pawls
        self._slots: list[int] = []
        self._plugboard = Permutation("", alphabet)

    # ── read-only shape ─────────────────────────────────────────
    @property
    def num_rotors(self) -> int:
        return self._num_rotors

    @property
    def pawls(self) -> int:
        return self._pawls

    @property
    def plugboard(self) -> Permutation:
        return self._plugboard

    @property
    def rotors(self) -> tuple[Rotor, ...]:
        return tuple(self._pool[i] for i in self._slots)

    def rotor(self, slot: int) -> Rotor:
        self._require_rotors()
        return self._pool[self._slots[slot]]

    # ── setup helpers ───────────────────────────────────────────

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Fill my slots with the pool rotors named *names*, reflector first."""
        if len(names) != self._num_rotors:
            raise EnigmaError(f"Need {self._num_rotors} rotor names, got {len(names)}")

        slots: list[int] = []
        for name in names:
            idx = next((i for i, r in enumerate(self._pool) if r.name == name), None)
            if idx is None:
                raise EnigmaError(f"No rotor named {name!r}")
            if idx in slots:
                raise EnigmaError(f"Rotor {name} used more than once")
            slots.append(idx)

        first_moving = self._num_rotors - self._pawls
        for slot, idx in enumerate(slots):
            rotor = self._pool[idx]
            if slot == 0:
                if not rotor.reflecting():
                    raise EnigmaError(f"Leftmost rotor {rotor.name} is not a reflector")
            elif slot < first_moving:
                if rotor.rotates() or rotor.reflecting():
                    raise EnigmaError(f"Rotor {rotor.name} in slot {slot + 1} must be fixed")
            elif not rotor.rotates():
                raise EnigmaError(f"Rotor {rotor.name} in slot {slot + 1} must be moving")

        self._slots = slots
        debug.log("machine", f"inserted {' '.join(names)}")

    def set_rotors(self, setting: str) -> None:
        """Rotate each non-reflector rotor to its window letter, left to right."""
        self._require_rotors()
        self.check_per_slot("Setting", setting)
        for slot, ch in enumerate(setting, start=1):
            self.rotor(slot).set(ch)

    def set_rings(self, rings: str) -> None:
        """Apply Ringstellung characters to each non-reflector rotor."""
        self._require_rotors()
        self.check_per_slot("Ring setting", rings)
        for slot, ch in enumerate(rings, start=1):
            self.rotor(slot).set_ring(ch)

    def set_plugboard(self, plugboard: Permutation) -> None:
        if plugboard.alphabet != self.alphabet:
            raise EnigmaError("Plugboard alphabet does not match machine alphabet")
        self._plugboard = plugboard
        debug.log("plugboard", f"{plugboard!r}")

    # ── stepping logic  ─────────────────────────────────────────

    def advance(self) -> None:
        """Step the rotors for one key press, double step included."""
        self._require_rotors()
        rotors = self.rotors
        last = len(rotors) - 1

        # notch tests see the positions from before this key press
        notched = [r.at_notch() for r in rotors]
        stepped: set[int] = set()
        for i in range(1, last):
            if notched[i + 1] and rotors[i].rotates():
                if i not in stepped:
                    rotors[i].advance()
                    stepped.add(i)
                rotors[i + 1].advance()
                stepped.add(i + 1)
        if last not in stepped:
            rotors[last].advance()

        debug.log("stepping", f"positions {[r.setting for r in rotors[1:]]}")

    # ── encipher one symbol  ────────────────────────────────────

    def convert(self, c: int) -> int:
        """Advance, then send index *c* through plugboard, rotors and back."""
        self.advance()
        rotors = self.rotors

        signal = self._plugboard.permute(c)
        for rotor in reversed(rotors):
            signal = rotor.convert_forward(signal)
        for rotor in rotors[1:]:
            signal = rotor.convert_backward(signal)
        signal = self._plugboard.permute(signal)

        debug.log("machine", f"{c} -> {signal}")
        return signal

    def convert_message(self, msg: str) -> str:
        """Convert *msg*; blanks pass through without stepping the rotors."""
        out: list[str] = []
        for pos, ch in enumerate(msg):
            if ch == BLANK:
                out.append(ch)
                continue
            if ch not in self.alphabet:
                raise EnigmaError(f"Character {ch!r} at position {pos} not in alphabet")
            out.append(self.alphabet.to_char(self.convert(self.alphabet.to_int(ch))))
        return "".join(out)

    # ── helpers ──────────────────────────────────────────────────

    def _require_rotors(self) -> None:
        if not self._slots:
            raise EnigmaError("No rotors inserted")

    def check_per_slot(self, what: str, text: str) -> None:
        """Raise unless *text* has one alphabet character per non-reflector slot."""
        need = self._num_rotors - 1
        if len(text) != need:
            raise EnigmaError(f"{what} {text!r} must have {need} characters")
        bad = [ch for ch in text if ch not in self.alphabet]
        if bad:
            raise EnigmaError(f"{what} {text!r} has characters not in alphabet: {bad}")

    def __repr__(self) -> str:
        names = " ".join(r.name for r in self.rotors) or "empty"
        return f"<Machine {self._num_rotors}/{self._pawls} [{names}]>"
