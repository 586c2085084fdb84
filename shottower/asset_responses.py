"""Responses of the serve API describing hosted assets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from shottower.errors import RequiredError, TypeAssertionError
from shottower.responses import is_zero_value


def _string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeAssertionError(f"field '{key}' must be a string")
    return value


def _mapping(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeAssertionError(f"field '{key}' must be an object")
    return value


def _check_required(schema: str, **fields: Any) -> None:
    for name, value in fields.items():
        if is_zero_value(value):
            raise RequiredError(schema, name)


@dataclass
class AssetResponseAttributes:
    """Attributes of a hosted asset."""

    id: str = ""
    owner: str = ""
    region: str = ""
    render_id: str = ""
    provider_id: str = ""
    filename: str = ""
    url: str = ""
    status: str = ""
    created: str = ""
    updated: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssetResponseAttributes:
        """Build the attributes from decoded JSON (camelCase keys)."""
        return cls(
            id=_string(data, "id"),
            owner=_string(data, "owner"),
            region=_string(data, "region"),
            render_id=_string(data, "renderId"),
            provider_id=_string(data, "providerId"),
            filename=_string(data, "filename"),
            url=_string(data, "url"),
            status=_string(data, "status"),
            created=_string(data, "created"),
            updated=_string(data, "updated"),
        )

    def validate(self) -> None:
        """Raise RequiredError when a required attribute is empty."""
        _check_required(
            "Asset Response Attributes",
            id=self.id,
            owner=self.owner,
            filename=self.filename,
            status=self.status,
            created=self.created,
            updated=self.updated,
        )


@dataclass
class AssetResponseData:
    """The resource type and the attributes of an asset."""

    type: str = ""
    attributes: AssetResponseAttributes = field(default_factory=AssetResponseAttributes)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssetResponseData:
        """Build the resource data from decoded JSON."""
        return cls(
            type=_string(data, "type"),
            attributes=AssetResponseAttributes.from_dict(_mapping(data, "attributes")),
        )

    def validate(self) -> None:
        """Raise RequiredError when the type or attributes are missing or incomplete."""
        _check_required(
            "Asset Response Data", type=self.type, attributes=self.attributes
        )
        self.attributes.validate()


@dataclass
class AssetResponse:
    """Response to a request for one asset."""

    data: AssetResponseData = field(default_factory=AssetResponseData)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssetResponse:
        """Build the response from decoded JSON."""
        return cls(data=AssetResponseData.from_dict(_mapping(data, "data")))

    def validate(self) -> None:
        """Raise RequiredError when the data is missing or incomplete."""
        _check_required("Asset Response", data=self.data)
        self.data.validate()


@dataclass
class AssetRenderResponse:
    """Response listing all assets produced by one render."""

    data: list[AssetResponseData] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssetRenderResponse:
        """Build the response from decoded JSON."""
        items = data.get("data")
        if items is None:
            items = []
        if not isinstance(items, list):
            raise TypeAssertionError("field 'data' must be an array")
        resources = []
        for item in items:
            if not isinstance(item, Mapping):
                raise TypeAssertionError("items of 'data' must be objects")
            resources.append(AssetResponseData.from_dict(item))
        return cls(data=resources)

    def validate(self) -> None:
        """Raise RequiredError when the list is empty or an item is incomplete."""
        _check_required("Asset Render Response", data=self.data)
        for item in self.data:
            item.validate()