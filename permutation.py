# permutation.py
from __future__ import annotations

import re

from alphabet import Alphabet
from debug import Debug
from errors import EnigmaError

debug = Debug()

_cycles_re = re.compile(r"^\s*(?:\([^()\s]*\)\s*)*$")
_group_re = re.compile(r"\(([^()\s]*)\)")


class Permutation:
    """A permutation of an alphabet given in cycle notation.

    ``"(cccc) (cc) ..."`` sends each character to the one after it in its
    cycle and the last character back to the first. Characters that appear
    in no cycle map to themselves. Whitespace between cycles is ignored.
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        if not _cycles_re.match(cycles):
            raise EnigmaError(f"Malformed cycles {cycles!r}")

        self._alphabet = alphabet
        self._cycles: tuple[str, ...] = tuple(_group_re.findall(cycles))

        n = alphabet.size()
        # integer lookup tables
        self._fwd = list(range(n))
        self._rev = list(range(n))

        seen: set[str] = set()
        for cycle in self._cycles:
            for ch in cycle:
                if ch not in alphabet:
                    raise EnigmaError(f"Cycle character {ch!r} not in alphabet")
                if ch in seen:
                    raise EnigmaError(f"Character {ch!r} repeated in cycles")
                seen.add(ch)
            for a, b in zip(cycle, cycle[1:] + cycle[:1]):
                ia, ib = alphabet.to_int(a), alphabet.to_int(b)
                self._fwd[ia] = ib
                self._rev[ib] = ia

        debug.log("permutation", f"{self!r}")

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def cycles(self) -> tuple[str, ...]:
        return self._cycles

    def size(self) -> int:
        return self._alphabet.size()

    def wrap(self, p: int) -> int:
        """Return P modulo the size of this permutation."""
        return p % self.size()

    # ── mapping ---------------------------------------------------
    def permute(self, p: int | str) -> int | str:
        """Apply the permutation to an index (wrapped) or a character."""
        if isinstance(p, str):
            return self._alphabet.to_char(self._fwd[self._alphabet.to_int(p)])
        return self._fwd[self.wrap(p)]

    def invert(self, c: int | str) -> int | str:
        """Apply the inverse permutation to an index (wrapped) or a character."""
        if isinstance(c, str):
            return self._alphabet.to_char(self._rev[self._alphabet.to_int(c)])
        return self._rev[self.wrap(c)]

    def derangement(self) -> bool:
        """True iff no character maps to itself."""
        return all(i != j for i, j in enumerate(self._fwd))

    def __repr__(self) -> str:
        body = " ".join(f"({c})" for c in self._cycles)
        return f"<Permutation {body}>"
