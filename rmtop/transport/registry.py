from __future__ import annotations

from typing import Dict, Type

from .base import Transport
from .tcp import TCPTransport
from .url import URLTransport
from .errors import TransportError


class TransportDriverRegistry:
    """
    Maps driver keys ("tcp", "url") -> transport classes. Keys are case-insensitive.
    """

    def __init__(self, drivers: Dict[str, Type[Transport]]):
        self._drivers: Dict[str, Type[Transport]] = {k.lower(): v for k, v in drivers.items()}

    @classmethod
    def default(cls) -> "TransportDriverRegistry":
        return cls({"tcp": TCPTransport, "url": URLTransport})

    def names(self) -> list[str]:
        return sorted(self._drivers)

    def has(self, driver: str) -> bool:
        return driver.lower() in self._drivers

    def get_class(self, driver: str) -> Type[Transport]:
        try:
            return self._drivers[driver.lower()]
        except KeyError:
            raise TransportError(
                f"Transport driver '{driver}' not registered (known: {', '.join(self.names()) or 'none'})"
            ) from None

    def create(self, driver: str, **params) -> Transport:
        """Instantiate (not open) a transport for `driver` with constructor params."""
        return self.get_class(driver)(**params)
