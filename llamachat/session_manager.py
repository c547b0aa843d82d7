"""Conversation history management."""

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    role: Role
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role.value, "content": self.content}


class SessionManager:
    """
    Owns the ordered chat history for one run of the program.

    Index 0 always holds exactly one system message. It is sent to the model
    with every exchange but is hidden from history views and counts.
    """

    def __init__(self, system_prompt: str):
        self.system_prompt: str = system_prompt
        self._messages: list[Message] = [Message(Role.SYSTEM, system_prompt)]

    def append_message(self, role: Role | str, content: str):
        """Append content to the conversation history"""
        self._messages.append(Message(Role(role), content))

    def reset(self):
        """Reset the history back to the lone system message"""
        self._messages = [Message(Role.SYSTEM, self.system_prompt)]

    def length(self) -> int:
        """Number of messages, excluding the system message"""
        return len(self._messages) - 1

    def snapshot(self) -> tuple[Message, ...]:
        """Full history, system message included"""
        return tuple(self._messages)

    def history(self) -> list[Message]:
        """History for display, system message excluded"""
        return self._messages[1:]

    def payload(self) -> list[dict]:
        """The snapshot in wire format"""
        return [m.to_dict() for m in self._messages]

    def count_turns(self) -> int:
        """Calculates and returns the turn number"""
        return sum(1 for m in self._messages if m.role is Role.USER)
