# rotor_and_reflector.py
from __future__ import annotations

from alphabet import Alphabet
from debug import Debug
from errors import EnigmaError
from permutation import Permutation

debug = Debug()


class Rotor:
    """A rotor named *name* implementing *perm* in its 0 setting.

    The base class neither rotates nor reflects; the machine only places its
    subclasses in slots.
    """

    def __init__(self, name: str, perm: Permutation) -> None:
        self.name = name
        self.permutation = perm
        self.setting = 0
        self.ring_setting = 0

    @property
    def alphabet(self) -> Alphabet:
        return self.permutation.alphabet

    @property
    def size(self) -> int:
        return self.permutation.size()

    # ── capabilities ---------------------------------------------
    def rotates(self) -> bool:
        return False

    def reflecting(self) -> bool:
        return False

    def at_notch(self) -> bool:
        """True iff I am positioned to let the rotor on my left advance."""
        return False

    def advance(self) -> None:
        pass

    # ── setting & ring helpers ───────────────────────────────────
    def set(self, posn: int | str) -> None:
        if isinstance(posn, str):
            if posn not in self.alphabet:
                raise EnigmaError(f"Rotor {self.name} cannot be set to {posn!r}: not in alphabet")
            posn = self.alphabet.to_int(posn)
        self.setting = self.permutation.wrap(posn)

    def set_ring(self, ring: int | str) -> None:
        """Apply a Ringstellung offset, as an index or an alphabet character."""
        if isinstance(ring, str):
            if ring not in self.alphabet:
                raise EnigmaError(f"Ring setting {ring!r} not in alphabet")
            ring = self.alphabet.to_int(ring)
        self.ring_setting = self.permutation.wrap(ring)

    # ── signal paths ---------------------------------------------
    def convert_forward(self, p: int) -> int:
        offset = self.setting - self.ring_setting
        mapped = self.permutation.permute(self.permutation.wrap(p + offset))
        return self.permutation.wrap(mapped - offset)

    def convert_backward(self, e: int) -> int:
        offset = self.setting - self.ring_setting
        mapped = self.permutation.invert(self.permutation.wrap(e + offset))
        return self.permutation.wrap(mapped - offset)

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} pos={self.setting} ring={self.ring_setting}>"


class FixedRotor(Rotor):
    """A non-moving, non-reflecting rotor."""


class MovingRotor(Rotor):
    """A rotor with a ratchet, stepping past the characters in *notches*."""

    def __init__(self, name: str, perm: Permutation, notches: str) -> None:
        super().__init__(name, perm)
        if not set(notches) <= set(self.alphabet):
            bad = sorted(set(notches) - set(self.alphabet))
            raise EnigmaError(f"Notch characters {bad} of rotor {name} not in alphabet")
        self._notches = notches
        self._notch_set = {self.alphabet.to_int(c) for c in notches}

    @property
    def notches(self) -> str:
        return self._notches

    def rotates(self) -> bool:
        return True

    def at_notch(self) -> bool:
        return self.setting in self._notch_set

    def advance(self) -> None:
        self.set(self.setting + 1)
        debug.log("rotor", f"{self.name} -> {self.alphabet.to_char(self.setting)}")


class Reflector(FixedRotor):
    """A fixed rotor whose permutation has no fixed points; forward pass only."""

    def __init__(self, name: str, perm: Permutation) -> None:
        if not perm.derangement():
            raise EnigmaError(f"Reflector {name} wiring must have no fixed points")
        super().__init__(name, perm)

    def reflecting(self) -> bool:
        return True

    def convert_backward(self, e: int) -> int:
        raise EnigmaError(f"Reflector {self.name} has no backward path")
