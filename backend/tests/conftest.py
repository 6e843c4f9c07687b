"""Shared test configuration, fixtures and upstream stubs."""

import os

# Settings are read at import time; keep tests off the network clock.
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("RETRY_BASE_DELAY_MS", "0")
os.environ.setdefault("RETRY_JITTER_MS", "0")
os.environ.setdefault("GEMINI_API_KEY", "test-key")

from types import SimpleNamespace

import pytest

from services.handlers.registry import clear as clear_registry


class StubGenerator:
    """Stands in for GeminiGenerator: replays scripted outcomes in order.

    An outcome that is an exception is raised; anything else is returned as
    the completion text. The last outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def generate(self, system, prompt, **kwargs):
        self.calls.append({"system": system, "prompt": prompt, **kwargs})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeModels:
    """Mimics ``client.aio.models`` of google-genai."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return SimpleNamespace(text=outcome)


@pytest.fixture(autouse=True)
def _reset_registry():
    """Handlers read settings when built; start each test fresh."""
    clear_registry()
    yield
    clear_registry()


@pytest.fixture
def fake_gemini(monkeypatch):
    """Install a fake genai client behind GeminiGenerator.

    Usage: ``models = fake_gemini("text", httpx.ReadTimeout("slow"))``
    """

    def install(*outcomes):
        models = FakeModels(*outcomes)
        client = SimpleNamespace(aio=SimpleNamespace(models=models))
        monkeypatch.setattr("services.gemini_client.get_client", lambda: client)
        return models

    return install
