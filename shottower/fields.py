"""Small building blocks of an edit: crop, flip, font, merge field, local resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from shottower.errors import RequiredError, TypeAssertionError
from shottower.responses import is_zero_value


def _number(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeAssertionError(f"field '{key}' must be a number")
    return float(value)


def _flag(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise TypeAssertionError(f"field '{key}' must be a boolean")
    return value


@dataclass
class Crop:
    """Relative amounts (0 to 1) to crop from each side of an asset."""

    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Crop:
        """Build a crop from decoded JSON; missing sides stay at 0."""
        return cls(
            top=_number(data, "top"),
            bottom=_number(data, "bottom"),
            left=_number(data, "left"),
            right=_number(data, "right"),
        )

    def validate(self) -> None:
        """A crop has no required fields."""


@dataclass
class FlipTransformation:
    """Mirror a clip horizontally and/or vertically."""

    horizontal: bool = False
    vertical: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FlipTransformation:
        """Build a flip from decoded JSON; missing flags stay False."""
        return cls(
            horizontal=_flag(data, "horizontal"),
            vertical=_flag(data, "vertical"),
        )

    def validate(self) -> None:
        """A flip has no required fields."""


@dataclass
class Font:
    """A custom font to download for HTML assets."""

    src: str = ""

    def validate(self) -> None:
        """Raise RequiredError when the source URL is missing."""
        if is_zero_value(self.src):
            raise RequiredError("Font", "src")


@dataclass
class MergeField:
    """A placeholder key and the value that replaces it."""

    find: str = ""
    replace: Any = None

    def validate(self) -> None:
        """Raise RequiredError when the key or the replacement is missing."""
        if is_zero_value(self.find):
            raise RequiredError("MergeField", "find")
        if self.replace is None:
            raise RequiredError("MergeField", "replace")


@dataclass
class LocalResourceTrackInfo:
    """Where in the timeline a local resource is used."""

    track: int = 0
    clip: int = 0
    handled: bool = False


@dataclass
class LocalResource:
    """A resource fetched to local storage and the clips that use it."""

    downloaded: datetime | None = None
    original_url: str = ""
    local_url: str = ""
    keep_cache: bool = False
    is_remote_resource: bool = False
    used: list[LocalResourceTrackInfo] = field(default_factory=list)