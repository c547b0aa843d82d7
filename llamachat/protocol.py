"""
Chat exchanges with the Ollama server.

An exchange sends the whole conversation to ``/api/chat`` and blocks until a
complete (non-streamed) reply arrives. Expected failures are returned as
result records instead of being raised, so the dispatch loop can inspect them
and show guidance that fits the failure:

- ``TransportFailure``: the server could not be reached at all
- ``ApiFailure``: the server answered but rejected the request
- ``MalformedResponseFailure``: the answer does not have the expected shape
"""

import json
from dataclasses import dataclass
from typing import Union

import httpx

from llamachat.config import Config
from llamachat.session_manager import SessionManager


@dataclass(frozen=True)
class Reply:
    text: str


@dataclass(frozen=True)
class TransportFailure:
    cause: str

    title = "CONNECTION ERROR"

    @property
    def detail(self) -> str:
        return f"HTTP request failed: {self.cause}"

    @property
    def hint(self) -> str:
        return "Make sure Ollama is running: ollama serve"


@dataclass(frozen=True)
class ApiFailure:
    message: str
    model: str
    status_code: int | None = None
    body: str = ""

    title = "API ERROR"

    @property
    def detail(self) -> str:
        if self.status_code is None:
            return f"Ollama Error: {self.message}"
        return f"Ollama API request failed with HTTP {self.status_code}: {self.body}"

    @property
    def hint(self) -> str:
        return (
            f"Make sure the model '{self.model}' is installed: "
            f"ollama pull {self.model}"
        )


@dataclass(frozen=True)
class MalformedResponseFailure:
    reason: str

    title = "INVALID RESPONSE"

    @property
    def detail(self) -> str:
        return f"Invalid Ollama API response: {self.reason}"

    @property
    def hint(self) -> str:
        return "The server answered with an unexpected payload."


ExchangeFailure = Union[TransportFailure, ApiFailure, MalformedResponseFailure]
ExchangeResult = Union[Reply, ExchangeFailure]


class ProtocolAdapter:
    """Encodes conversations, sends them, and classifies the outcome"""

    def __init__(self, config: Config):
        self.config: Config = config
        # Persistent client, reused by every chat and listing call
        self.client = httpx.Client(headers={"Content-Type": "application/json"})

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.client.close()

    def exchange(self, session: SessionManager, model: str) -> ExchangeResult:
        """Send the full conversation and return the reply or a failure"""
        body = {
            "model": model,
            "messages": session.payload(),
            "stream": False,
        }
        try:
            response = self.client.post(
                self.config.chat_url, json=body, timeout=self.config.chat_timeout
            )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            return TransportFailure(str(e) or type(e).__name__)

        if response.status_code != 200:
            return ApiFailure(
                "request rejected",
                model,
                status_code=response.status_code,
                body=response.text,
            )
        return parse_chat_body(response.text, model)


def parse_chat_body(raw: str, model: str) -> ExchangeResult:
    """Decode a 200 response from /api/chat"""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        return MalformedResponseFailure(f"JSON parsing error: {e}")
    if not isinstance(data, dict):
        return MalformedResponseFailure("expected a JSON object")

    if "error" in data:
        return ApiFailure(str(data["error"]), model)

    message = data.get("message")
    if not isinstance(message, dict) or "content" not in message:
        return MalformedResponseFailure("no message content found")
    content = message["content"]
    if not isinstance(content, str):
        return MalformedResponseFailure("message content is not text")
    return Reply(content)
