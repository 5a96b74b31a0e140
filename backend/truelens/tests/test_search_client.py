# truelens/tests/test_search_client.py
import pytest
import requests

from truelens.clients.search_client import SerperClient


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


def test_search_posts_query_with_api_key(monkeypatch):
    client = SerperClient(api_key="secret", num_results=5)
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json))
        return FakeResponse({"organic": [{"title": "Bridge history", "link": "https://x.example"}]})

    monkeypatch.setattr(client.session, "post", fake_post)

    assert client.has_organic_results("bridge opened 1932") is True
    assert calls == [(SerperClient.BASE_URL, {"q": "bridge opened 1932", "num": 5})]
    assert client.session.headers["X-API-KEY"] == "secret"


def test_no_organic_results(monkeypatch):
    client = SerperClient(api_key="secret")
    monkeypatch.setattr(client.session, "post", lambda *a, **kw: FakeResponse({"knowledgeGraph": {}}))
    assert client.has_organic_results("obscure claim") is False


def test_http_errors_propagate(monkeypatch):
    client = SerperClient(api_key="secret")
    monkeypatch.setattr(client.session, "post", lambda *a, **kw: FakeResponse({}, status_code=403))
    with pytest.raises(requests.HTTPError):
        client.search("anything")
