"""Common test fixtures and utilities for claude-mode tests."""

import json
import socket

import httpx
import pytest

from claude_mode.config.env_vars import EnvVar
from claude_mode.context import ApplicationContext


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate every test from the developer's environment and home directory."""
    for var in EnvVar:
        monkeypatch.delenv(var.value, raising=False)
    monkeypatch.setenv(EnvVar.HOME_DIR.value, str(tmp_path / "home"))
    yield


@pytest.fixture
def config_dir(tmp_path):
    return tmp_path / ".claude-mode"


def write_config(config_dir, data):
    """Write a claude-mode.json with the given (camelCase) content."""
    config_dir.mkdir(parents=True, exist_ok=True)
    path = config_dir / "claude-mode.json"
    path.write_text(json.dumps(data))
    return path


def models_payload(*model_ids):
    return {"data": [{"id": model_id, "object": "model"} for model_id in model_ids]}


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler):
        self.requests = []

        async def recording_handler(request):
            self.requests.append(request)
            result = handler(request)
            if hasattr(result, "__await__"):
                result = await result
            return result

        super().__init__(recording_handler)


def make_context(config_dir, handler=None, clock=None, **kwargs):
    """ApplicationContext rooted at *config_dir* with HTTP served by *handler*."""
    transport = RecordingTransport(handler) if handler else None
    extra = {"clock": clock} if clock else {}
    return ApplicationContext.create(
        config_dir=config_dir, transport=transport, **extra, **kwargs
    )


@pytest.fixture
def closed_port():
    """A local TCP port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return port
