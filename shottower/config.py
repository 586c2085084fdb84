"""Server configuration: root URL and the API endpoint flavour."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class EndpointType(IntEnum):
    """Which API version the server exposes."""

    V1 = 0
    STAGE = 1

    def __str__(self) -> str:
        return _ENDPOINT_NAMES.get(self, "unknown")


_ENDPOINT_NAMES = {
    EndpointType.V1: "v1",
    EndpointType.STAGE: "stage",
}


@dataclass(frozen=True)
class ShottowerConfig:
    """Base URLs of the edit, serve and download APIs."""

    root_url: str
    endpoint_type: EndpointType

    @property
    def render_base_url(self) -> str:
        """Base URL of the edit (render) API."""
        return f"{self.root_url}/{self.endpoint_type}"

    @property
    def serve_base_url(self) -> str:
        """Base URL of the serve API."""
        return f"{self.root_url}/serve/{self.endpoint_type}"

    @property
    def download_base_url(self) -> str:
        """Base URL under which rendered files are downloaded."""
        return f"{self.root_url}/dl/{self.endpoint_type}"