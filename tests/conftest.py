from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from gemchat.config import GemConfig


class FakeResponse:
    def __init__(self, text: str) -> None:
        self.text = text


class FakeModels:
    def __init__(self, replies: list) -> None:
        self.replies = list(replies)
        self.calls: list[dict[str, Any]] = []

    def generate_content(self, *, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return FakeResponse(reply)


class FakeClient:
    def __init__(self, replies: list, api_key: str = "") -> None:
        self.api_key = api_key
        self.models = FakeModels(replies)


@pytest.fixture
def config(tmp_path: Path) -> GemConfig:
    return GemConfig(path=tmp_path / "home" / "config.json")


@pytest.fixture
def make_factory():
    """Build a client factory that hands out one FakeClient with canned replies."""

    def _make(*replies):
        holder: dict[str, FakeClient] = {}

        def factory(api_key: str):
            holder["client"] = FakeClient(list(replies), api_key=api_key)
            return holder["client"]

        factory.holder = holder
        return factory

    return _make
