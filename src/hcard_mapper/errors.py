from __future__ import annotations

from typing import Any


class HCardError(Exception):
    """Base class for everything the mapping engine raises on purpose."""


class MalformedRecordError(HCardError):
    """A card has a shape the flattener cannot collapse.

    `path` is the chain of property names leading to the offending value,
    `card` the whole card being flattened (kept for the log line).
    """

    def __init__(self, message: str, path: tuple[str, ...] = (), card: Any = None):
        super().__init__(message)
        self.path = path
        self.card = card

    @property
    def property_path(self) -> str:
        return ".".join(self.path) or "<root>"

    def __str__(self) -> str:
        return f"{self.args[0]} (at {self.property_path})"


class CardNotFoundError(HCardError):
    def __init__(self, locator: str | None = None):
        super().__init__(f"No hCard found at {locator}" if locator else "No hCard found")
        self.locator = locator


class InvalidMappingError(HCardError):
    pass


class UpstreamError(HCardError):
    """The upstream parser service could not be reached or answered badly."""
