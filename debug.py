# debug.py
from __future__ import annotations
import logging
from typing import Dict

COMPONENTS = (
    "alphabet",
    "permutation",
    "rotor",
    "stepping",
    "plugboard",
    "machine",
    "config",
)


class Debug:
    _root_configured: bool = False          # class-level guard

    # shared by every instance so the CLI can switch modules on
    _components: Dict[str, bool] = {c: False for c in COMPONENTS}
    _enabled: bool = True

    def __init__(self, *, log_to: str | None = None) -> None:
        """
        If `log_to` is given, messages also stream to that file.
        Multiple Debug() instances share the same logger and toggles.
        """
        self.logger = logging.getLogger("ENIGMA")
        if log_to or not Debug._root_configured:
            self.configure(log_to=log_to)

    @classmethod
    def configure(cls, *, log_to: str | None = None) -> None:
        """Attach handlers once; later calls only add the file handler."""
        logger = logging.getLogger("ENIGMA")
        fmt = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        if not cls._root_configured:
            handler = logging.StreamHandler()
            handler.setFormatter(fmt)
            logger.addHandler(handler)
            logger.setLevel(logging.DEBUG)
            logger.propagate = False    # own handler only; no root echo
            cls._root_configured = True
        if log_to:
            file_handler = logging.FileHandler(log_to, encoding="utf-8")
            file_handler.setFormatter(fmt)
            logger.addHandler(file_handler)

    # ── logging API ──────────────────────────────────────────────
    def log(self, component: str, message: str) -> None:
        if Debug._enabled and Debug._components.get(component, False):
            self.logger.debug("[%s] %s", component.upper(), message)

    # ── component toggles ────────────────────────────────────────
    def enable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            Debug._components[c] = True

    def disable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            Debug._components[c] = False

    def toggle(self, component: str) -> None:
        self._require(component)
        Debug._components[component] = not Debug._components[component]

    def toggle_global(self, state: bool) -> None:
        """Switch every component on/off at once."""
        Debug._enabled = state

    @property
    def enabled(self) -> bool:
        return Debug._enabled

    def status(self) -> Dict[str, bool]:
        """Return a *copy* of the current component map."""
        return Debug._components.copy()

    # ── helpers ──────────────────────────────────────────────────
    def _require(self, component: str) -> None:
        if component not in Debug._components:
            raise ValueError(f"No such component: {component!r}")

    # nicety for `print(dbg)`
    def __repr__(self) -> str:
        active = [k for k, v in Debug._components.items() if v]
        return f"<Debug enabled={Debug._enabled} active={active}>"
