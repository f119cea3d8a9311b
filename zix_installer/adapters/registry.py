"""
Backend registry: closed set of fetch backends, looked up by name.

Registration order is priority order.  Selection is a pure probe:
nothing but existence checks on PATH.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable

from zix_installer.adapters.backends import Aria2Backend, CurlBackend, WgetBackend
from zix_installer.adapters.base import Backend
from zix_installer.core.errors import NoBackendAvailableError

logger = logging.getLogger(__name__)


class BackendRegistry:
    """Ordered registry of fetch backends."""

    def __init__(self, backends: list[Backend] | None = None):
        self._backends: dict[str, Backend] = {}
        for backend in backends or []:
            self.register(backend)

    @classmethod
    def default(cls) -> BackendRegistry:
        """curl, then wget, then aria2c."""
        return cls([CurlBackend(), WgetBackend(), Aria2Backend()])

    def register(self, backend: Backend) -> None:
        name = backend.name
        if name in self._backends:
            logger.warning("Overwriting existing backend: %s", name)
        self._backends[name] = backend
        logger.debug("Registered backend: %s", name)

    def get(self, name: str) -> Backend | None:
        return self._backends.get(name)

    def names(self) -> list[str]:
        return list(self._backends)

    def select(
        self,
        which: Callable[[str], str | None] = shutil.which,
        override: str | None = None,
    ) -> Backend:
        """Pick the backend to fetch with.

        Args:
            which: PATH lookup (``shutil.which`` signature).
            override: Force a specific backend by name.

        Raises:
            NoBackendAvailableError: Override unknown or not installed,
                or no registered backend is on PATH.
        """
        if override:
            backend = self._backends.get(override)
            if backend is None:
                raise NoBackendAvailableError(
                    f"Unknown download tool '{override}'. "
                    f"Choose one of: {', '.join(self.names())}"
                )
            if not backend.is_available(which):
                raise NoBackendAvailableError(
                    f"Requested download tool '{override}' is not installed"
                )
            logger.debug("Backend forced by override: %s", override)
            return backend

        for backend in self._backends.values():
            if backend.is_available(which):
                return backend

        raise NoBackendAvailableError(
            f"No download tool found. Please install {_human_list(self.names())}."
        )


def _human_list(names: list[str]) -> str:
    if len(names) <= 1:
        return "".join(names)
    return ", ".join(names[:-1]) + f", or {names[-1]}"
