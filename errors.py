# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Any configuration or runtime violation of the machine.

    Raised where the violation is detected and left to propagate; only the
    command-line driver turns it into a console message and exit status.
    """
