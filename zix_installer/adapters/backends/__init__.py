"""Built-in fetch backends, in priority order."""

from zix_installer.adapters.backends.aria2 import Aria2Backend
from zix_installer.adapters.backends.curl import CurlBackend
from zix_installer.adapters.backends.wget import WgetBackend

__all__ = ["Aria2Backend", "CurlBackend", "WgetBackend"]
