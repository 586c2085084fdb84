"""Assets a clip can hold: audio, HTML, image and luma matte."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping, Optional, Union

from shottower.errors import RequiredError, TypeAssertionError
from shottower.fields import Crop
from shottower.responses import is_zero_value


class AssetType(IntEnum):
    """Kind of asset held by a clip."""

    VIDEO = 0
    IMAGE = 1
    TITLE = 2
    HTML = 3
    AUDIO = 4
    LUMA = 5
    UNKNOWN = 6

    def __str__(self) -> str:
        return _ASSET_TYPE_NAMES.get(self, "unknown")


_ASSET_TYPE_NAMES = {
    AssetType.VIDEO: "video",
    AssetType.IMAGE: "image",
    AssetType.TITLE: "title",
    AssetType.HTML: "html",
    AssetType.AUDIO: "audio",
    AssetType.LUMA: "luma",
}


def _required_string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise TypeAssertionError(f"field '{key}' must be a string")
    return value


def _string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeAssertionError(f"field '{key}' must be a string")
    return value


def _number(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeAssertionError(f"field '{key}' must be a number")
    return float(value)


def _integer(data: Mapping[str, Any], key: str) -> int:
    return int(_number(data, key))


def _mapping(data: Mapping[str, Any], key: str) -> Optional[Mapping[str, Any]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise TypeAssertionError(f"field '{key}' must be an object")
    return value


def _check_required(schema: str, **fields: Any) -> None:
    for name, value in fields.items():
        if is_zero_value(value):
            raise RequiredError(schema, name)


@dataclass
class AudioAsset:
    """Sound played at a given point of the timeline."""

    type: str = "audio"
    src: str = ""
    trim: float = 0.0
    volume: float = 0.0
    effect: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AudioAsset:
        """Build an audio asset from decoded JSON."""
        return cls(
            type=_required_string(data, "type"),
            src=_string(data, "src"),
            trim=_number(data, "trim"),
            volume=_number(data, "volume"),
            effect=_string(data, "effect"),
        )

    def validate(self) -> None:
        """Raise RequiredError when the type or source is missing."""
        _check_required("Audio", type=self.type, src=self.src)


@dataclass
class HTMLAsset:
    """Text laid out with HTML and CSS inside a bounding box."""

    type: str = "html"
    html: str = ""
    css: str = ""
    width: int = 0
    height: int = 0
    background: str = ""
    position: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HTMLAsset:
        """Build an HTML asset from decoded JSON; sizes are truncated to integers."""
        return cls(
            type=_required_string(data, "type"),
            html=_string(data, "html"),
            css=_string(data, "css"),
            width=_integer(data, "width"),
            height=_integer(data, "height"),
            background=_string(data, "background"),
            position=_string(data, "position"),
        )

    def validate(self) -> None:
        """Raise RequiredError when the type or HTML text is missing."""
        _check_required("HTML Asset", type=self.type, html=self.html)


@dataclass
class ImageAsset:
    """A still image shown for the length of its clip."""

    type: str = "image"
    src: str = ""
    crop: Optional[Crop] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ImageAsset:
        """Build an image asset from decoded JSON."""
        crop = _mapping(data, "crop")
        return cls(
            type=_required_string(data, "type"),
            src=_string(data, "src"),
            crop=Crop.from_dict(crop) if crop is not None else None,
        )

    def validate(self) -> None:
        """Raise RequiredError when the type or source is missing."""
        _check_required("Image Asset", type=self.type, src=self.src)
        if self.crop is not None:
            self.crop.validate()


@dataclass
class LumaAsset:
    """A luma matte used for masks and transitions."""

    type: str = "luma"
    src: str = ""
    trim: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LumaAsset:
        """Build a luma asset from decoded JSON."""
        return cls(
            type=_required_string(data, "type"),
            src=_string(data, "src"),
            trim=_number(data, "trim"),
        )

    def validate(self) -> None:
        """Raise RequiredError when the type or source is missing."""
        _check_required("Luma", type=self.type, src=self.src)


Asset = Union[AudioAsset, HTMLAsset, ImageAsset, LumaAsset]

_FACTORIES = {
    "image": ImageAsset,
    "html": HTMLAsset,
    "audio": AudioAsset,
    "luma": LumaAsset,
}

_TYPES_BY_CLASS = {
    ImageAsset: AssetType.IMAGE,
    HTMLAsset: AssetType.HTML,
    AudioAsset: AssetType.AUDIO,
    LumaAsset: AssetType.LUMA,
}


def new_asset(asset_type: str, data: Mapping[str, Any]) -> Optional[Asset]:
    """Build the asset named by ``asset_type``, or None for a type not handled."""
    factory = _FACTORIES.get(asset_type)
    if factory is None:
        return None
    return factory.from_dict(data)


def get_asset_type(asset: Any) -> AssetType:
    """Tell which kind of asset an object is."""
    return _TYPES_BY_CLASS.get(type(asset), AssetType.UNKNOWN)


def assert_asset_required(asset: Any) -> None:
    """Validate an asset of a known kind; anything else passes unchecked."""
    if get_asset_type(asset) is not AssetType.UNKNOWN:
        asset.validate()