# alphabet.py
from __future__ import annotations

from debug import Debug
from errors import EnigmaError

debug = Debug()

UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class Alphabet:
    """An ordered set of encodable characters.

    Character number *k* has index *k*; no character may appear twice.
    """

    def __init__(self, chars: str = UPPER) -> None:
        if not chars:
            raise EnigmaError("Alphabet must have at least one character")
        self.alpha_to_index: dict[str, int] = {}
        for i, ch in enumerate(chars):
            if ch in self.alpha_to_index:
                raise EnigmaError(f"Alphabet has a repeated character {ch!r}")
            self.alpha_to_index[ch] = i
        self._chars: str = chars
        debug.log("alphabet", f"{len(chars)} symbols: {chars}")

    @property
    def chars(self) -> str:
        return self._chars

    def size(self) -> int:
        return len(self._chars)

    def contains(self, ch: str) -> bool:
        return ch in self.alpha_to_index

    # character → index
    def to_int(self, ch: str) -> int:
        try:
            return self.alpha_to_index[ch]
        except KeyError:
            raise EnigmaError(
                f"Invalid character {ch!r} for current alphabet."
            ) from None

    # index → character
    def to_char(self, index: int) -> str:
        if not (0 <= index < len(self._chars)):
            hi = len(self._chars) - 1
            raise EnigmaError(f"Index {index} out of range 0–{hi}")
        return self._chars[index]

    # ── niceties --------------------------------------------------
    def __len__(self) -> int:
        return len(self._chars)

    def __contains__(self, ch: object) -> bool:
        return ch in self.alpha_to_index

    def __iter__(self):
        return iter(self._chars)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self._chars == other._chars

    def __hash__(self) -> int:
        return hash(self._chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self._chars!r}>"
