"""Model listing and health check tests."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from llamachat.config import Config
from llamachat.registry import ModelDescriptor, ModelRegistry

TAGS_URL = "http://localhost:11434/api/tags"


def _response(status: int, **kwargs) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("GET", TAGS_URL), **kwargs)


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def registry(client):
    return ModelRegistry(Config(), client)


def test_list_models_preserves_server_order(registry, client):
    client.get.return_value = _response(
        200,
        json={
            "models": [
                {"name": "llama3.2:latest"},
                {"name": "codellama:7b"},
                {"name": "phi3:mini"},
            ]
        },
    )

    assert registry.list_models() == [
        ModelDescriptor("llama3.2:latest"),
        ModelDescriptor("codellama:7b"),
        ModelDescriptor("phi3:mini"),
    ]
    client.get.assert_called_once_with(TAGS_URL, timeout=Config().listing_timeout)


def test_list_models_is_never_cached(registry, client):
    client.get.side_effect = [
        _response(200, json={"models": [{"name": "a"}]}),
        _response(200, json={"models": [{"name": "a"}, {"name": "b"}]}),
    ]
    assert len(registry.list_models()) == 1
    assert len(registry.list_models()) == 2


def test_list_models_returns_empty_when_unreachable(registry, client):
    client.get.side_effect = httpx.ConnectError("Connection refused")
    assert registry.list_models() == []


@pytest.mark.parametrize(
    "response",
    [
        _response(500, text="boom"),
        _response(200, text="<html>"),
        _response(200, json={"models": "nope"}),
        _response(200, json={}),
        _response(200, json=["llama3.2"]),
    ],
)
def test_list_models_returns_empty_on_bad_payloads(registry, client, response):
    client.get.return_value = response
    assert registry.list_models() == []


def test_list_models_skips_nameless_entries(registry, client):
    client.get.return_value = _response(
        200, json={"models": [{"model": "x"}, {"name": 3}, {"name": "ok"}, "junk"]}
    )
    assert registry.list_models() == [ModelDescriptor("ok")]


@patch("llamachat.registry.httpx.Client")
def test_check_health_uses_short_lived_probe(mock_client_cls, registry, client):
    probe = mock_client_cls.return_value.__enter__.return_value
    probe.get.return_value = _response(200, json={"models": []})

    assert registry.check_health() is True
    mock_client_cls.assert_called_once_with(timeout=Config().probe_timeout)
    probe.get.assert_called_once_with(TAGS_URL)
    # The persistent client is not used for probes
    client.get.assert_not_called()


@patch("llamachat.registry.httpx.Client")
def test_check_health_false_on_error_status(mock_client_cls, registry):
    probe = mock_client_cls.return_value.__enter__.return_value
    probe.get.return_value = _response(503, text="starting")
    assert registry.check_health() is False


@patch("llamachat.registry.httpx.Client")
def test_check_health_never_raises(mock_client_cls, registry):
    probe = mock_client_cls.return_value.__enter__.return_value
    probe.get.side_effect = httpx.ConnectTimeout("timed out")
    assert registry.check_health() is False


@pytest.fixture
def unparsable_host_registry():
    config = Config()
    config.host = "http://[::1"
    with httpx.Client() as client:
        yield ModelRegistry(config, client)


def test_check_health_false_for_unparsable_host(unparsable_host_registry):
    assert unparsable_host_registry.check_health() is False


def test_list_models_empty_for_unparsable_host(unparsable_host_registry):
    assert unparsable_host_registry.list_models() == []
