"""Installed-model listing and server health checks."""

import logging
from dataclasses import dataclass

import httpx

from llamachat.config import Config


@dataclass(frozen=True)
class ModelDescriptor:
    identifier: str


class ModelRegistry:
    """
    Queries the server for installed models.

    Nothing is cached: models can be pulled or removed out-of-band, so every
    call asks the server again.
    """

    def __init__(self, config: Config, client: httpx.Client):
        self.config: Config = config
        self.client: httpx.Client = client

    def check_health(self) -> bool:
        """Probe the server on an isolated short-lived client. Never raises."""
        try:
            with httpx.Client(timeout=self.config.probe_timeout) as probe:
                response = probe.get(self.config.tags_url)
            return not response.is_error
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logging.error(f"Health check failed: {e}")
            return False

    def list_models(self) -> list[ModelDescriptor]:
        """Installed models in server order, or an empty list on any failure"""
        try:
            response = self.client.get(
                self.config.tags_url, timeout=self.config.listing_timeout
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logging.error(f"Model listing failed: {e}")
            return []

        if not isinstance(data, dict) or not isinstance(data.get("models"), list):
            return []
        return [
            ModelDescriptor(entry["name"])
            for entry in data["models"]
            if isinstance(entry, dict) and isinstance(entry.get("name"), str)
        ]
