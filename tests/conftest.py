"""
Shared fixtures: a scripted fake engine client and a fixed clock.
"""

from datetime import datetime, timezone

import pytest

from trustlens_agent.models import EngineReply


class FakeEngine:
    """Engine client double: returns a canned reply or raises a canned error."""

    def __init__(self, text: str = "", *, citations=None, error: Exception | None = None) -> None:
        self.text = text
        self.citations = list(citations or [])
        self.error = error
        self.calls = []
        self.closed = False

    async def generate(self, request, *, system_instruction: str, prompt: str) -> EngineReply:
        self.calls.append({"request": request, "system_instruction": system_instruction, "prompt": prompt})
        if self.error is not None:
            raise self.error
        return EngineReply(text=self.text, citations=self.citations)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_engine_factory():
    return FakeEngine


@pytest.fixture
def fixed_now():
    return datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)
