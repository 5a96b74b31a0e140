# truelens/tests/test_llm_client.py
import json
from types import SimpleNamespace

import pytest

from truelens.clients.llm_client import LLMClient


@pytest.fixture
def gemini(monkeypatch):
    client = LLMClient(provider="gemini", model="gemini-1.5-pro", api_key="test-key", log_calls=False)
    monkeypatch.setattr(client.client, "generate_content",
                        lambda prompt, generation_config=None: SimpleNamespace(text='["a", "b"]'))
    return client


def test_call_returns_text_and_latency(gemini):
    result = gemini.call("Extract claims")
    assert result["response"] == '["a", "b"]'
    assert result["latency_ms"] >= 0


def test_repeated_calls_keep_no_history(gemini):
    for _ in range(100):
        gemini.call("Extract claims")
    assert not hasattr(gemini, "call_log")


def test_call_log_file_only_when_enabled(gemini, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    gemini.call("Extract claims")
    assert not (tmp_path / "logs").exists()

    gemini.log_calls = True
    gemini.call("Extract claims")
    lines = (tmp_path / "logs" / "llm_calls.jsonl").read_text().splitlines()
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry["model"] == "gemini-1.5-pro"
    assert entry["prompt_length"] == len("Extract claims")


def test_unsupported_provider():
    with pytest.raises(ValueError):
        LLMClient(provider="other", model="m", api_key="k")
