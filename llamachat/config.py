"""Handles all user-facing configuration actions."""

import json
import os

from llamachat.globals import CONFIG_FILE

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful terminal assistant. Provide clear, concise responses "
    "focused on programming and technical help."
)


def _same_kind(default, value) -> bool:
    """Stored values must match the type of the default they replace"""
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(default, bool) and isinstance(value, bool)
    if isinstance(default, (int, float)):
        return isinstance(value, (int, float))
    return isinstance(value, type(default))


class Config:
    """User-facing configuration variables"""

    def __init__(self):
        # Default values
        self.host: str = "http://localhost:11434"
        self.default_model: str = "llama3.2"
        self.system_prompt: str = DEFAULT_SYSTEM_PROMPT
        # Local inference is far slower than a liveness check
        self.chat_timeout: float = 60
        self.listing_timeout: float = 10
        self.probe_timeout: float = 5
        self.rich_code_theme: str = "monokai"

    def save(self):
        """Saves any config changes to the config file."""
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(self.__dict__, f, indent=2)

    def load(self):
        """Loads the config file, then applies environment overrides."""
        if not os.path.exists(CONFIG_FILE):
            self.save()
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Settings must be a JSON object: {CONFIG_FILE}")
        for key, val in data.items():
            if hasattr(self, key) and _same_kind(getattr(self, key), val):
                setattr(self, key, val)
        env_host = os.getenv("OLLAMA_HOST")
        if env_host:
            self.host = env_host

    @property
    def base_url(self) -> str:
        """Server root, without a trailing slash"""
        host = self.host.rstrip("/")
        if not host.startswith(("http://", "https://")):
            host = f"http://{host}"
        return host

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}/api/chat"

    @property
    def tags_url(self) -> str:
        return f"{self.base_url}/api/tags"
