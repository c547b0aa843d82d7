"""The mutable state owned by the dispatch loop."""

from dataclasses import dataclass

from llamachat.config import Config
from llamachat.protocol import ProtocolAdapter
from llamachat.registry import ModelRegistry
from llamachat.session_manager import SessionManager


@dataclass
class ChatContext:
    """Everything a command or chat turn may read or change"""

    config: Config
    session: SessionManager
    adapter: ProtocolAdapter
    registry: ModelRegistry
    model: str

    @classmethod
    def create(cls, config: Config, model: str | None = None) -> "ChatContext":
        """Builds the context; fails only if the HTTP client cannot be created"""
        adapter = ProtocolAdapter(config)
        return cls(
            config=config,
            session=SessionManager(config.system_prompt),
            adapter=adapter,
            registry=ModelRegistry(config, adapter.client),
            model=model or config.default_model,
        )

    def close(self):
        self.adapter.close()
