from __future__ import annotations

import json
import re

import pytest

from chatstream_providers.base.errors import ConfigurationError
from chatstream_providers.base.models import Message
from chatstream_providers.gemini.request_builder import build_request_body, redacted_url, stream_url


def test_standard_model_uses_system_instruction_and_model_role():
    data = json.loads(
        build_request_body("Stay in character.", [Message.user("hi"), Message.assistant("hello")], "gemini-2.5-pro")
    )
    assert data["system_instruction"] == {"parts": [{"text": "Stay in character."}]}
    assert data["contents"] == [
        {"role": "user", "parts": [{"text": "hi"}]},
        {"role": "model", "parts": [{"text": "hello"}]},
    ]
    assert data["generation_config"] == {}


def test_gemma_folds_instruction_into_first_content_with_nonce():
    data = json.loads(build_request_body("Describe the quest.", [Message.user("go")], "gemma-test"))
    assert "system_instruction" not in data
    first = data["contents"][0]
    assert first["role"] == "user"
    assert re.match(r"^\d+ Describe the quest\.$", first["parts"][0]["text"])
    assert data["contents"][1] == {"role": "user", "parts": [{"text": "go"}]}


def test_gemma_nonce_source_is_injectable():
    data = json.loads(build_request_body("I", [Message.user("m")], "Gemma-3-27b-it", nonce_source=lambda: 42))
    assert data["contents"][0]["parts"][0]["text"] == "42 I"


def test_gemma_nonce_differs_between_calls():
    texts = {
        json.loads(build_request_body("I", [Message.user("m")], "gemma-test"))["contents"][0]["parts"][0]["text"]
        for _ in range(5)
    }
    assert len(texts) > 1


def test_flash_model_disables_thinking():
    data = json.loads(build_request_body("I", [Message.user("m")], "gemini-2.5-flash"))
    assert data["generation_config"] == {"thinking_config": {"thinking_budget": 0}}


def test_empty_instruction_sends_no_system_instruction():
    data = json.loads(build_request_body("", [Message.user("m")], "gemma-test"))
    assert "system_instruction" not in data
    assert data["contents"] == [{"role": "user", "parts": [{"text": "m"}]}]


def test_urls():
    base = "https://generativelanguage.googleapis.com/v1beta/"
    assert (
        stream_url(base, "gemini-2.5-flash", "KEY")
        == "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:streamGenerateContent?alt=sse&key=KEY"
    )
    assert redacted_url(base, "gemini-2.5-flash").endswith("key=***")


def test_missing_model_or_messages():
    with pytest.raises(ConfigurationError):
        build_request_body("i", [Message.user("x")], "")
    with pytest.raises(ConfigurationError):
        build_request_body("i", [], "gemini-2.5-pro")
