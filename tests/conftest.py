"""Shared fixtures for all tests."""

import io
import base64
from types import SimpleNamespace

import pytest
from PIL import Image

from src.agents.tutor_agent.agent import TutorSession


@pytest.fixture
def png_bytes() -> bytes:
    """A tiny valid PNG."""
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color=(255, 255, 255)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_b64(png_bytes) -> str:
    return base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def fake_client(mocker):
    """Stand-in for google.genai.Client; replies "reply 1", "reply 2", ..."""
    client = mocker.MagicMock()
    counter = {"n": 0}

    def _reply(**kwargs):
        counter["n"] += 1
        return SimpleNamespace(text=f"reply {counter['n']}")

    client.models.generate_content.side_effect = _reply
    return client


@pytest.fixture
def session(fake_client) -> TutorSession:
    return TutorSession(client=fake_client, model="test-model", thinking_budget=1024)
