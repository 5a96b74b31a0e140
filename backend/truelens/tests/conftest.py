# truelens/tests/conftest.py
import json
from typing import List

import pytest
from fastapi.testclient import TestClient
from firebase_admin import auth as firebase_auth
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from truelens.auth import get_token_verifier
from truelens.config import Settings
from truelens.deps import get_llm_client, get_search_client
from truelens.main import create_app


class FakeLLM:
    """Answers prompts in order; records every prompt it saw."""

    def __init__(self, responses: List[str]):
        self.responses = list(responses)
        self.prompts = []

    def call(self, prompt, temperature=0.3, max_tokens=1000):
        self.prompts.append(prompt)
        if not self.responses:
            raise RuntimeError("no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return {"response": response, "latency_ms": 1.0}


class FakeSearcher:
    def __init__(self, hits=None, fail=False):
        self.hits = hits or {}
        self.fail = fail
        self.queries = []

    def has_organic_results(self, query):
        self.queries.append(query)
        if self.fail:
            raise ConnectionError("search unavailable")
        return self.hits.get(query, False)


class FakeVerifier:
    def __init__(self, tokens=None):
        self.tokens = tokens or {"good-token": "user-1", "other-token": "user-2"}

    def verify(self, token):
        if token not in self.tokens:
            raise firebase_auth.InvalidIdTokenError("Could not verify token signature.")
        return self.tokens[token]


AUTH = {"Authorization": "Bearer good-token"}

CLAIMS = ["The bridge opened in 1932", "It cost 10 million dollars", "It is 500 m long", "It was repainted in 2020"]
SUMMARY = ["A bridge opened.", "It was expensive.", "It is long."]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def settings():
    return Settings(rate_limit_enabled=False, log_llm_calls=False)


@pytest.fixture
def llm():
    return FakeLLM([json.dumps(CLAIMS), json.dumps(SUMMARY)])


@pytest.fixture
def searcher():
    return None


@pytest.fixture
def app(engine, settings, llm, searcher):
    app = create_app(settings)
    app.state.engine = engine
    app.dependency_overrides[get_token_verifier] = lambda: FakeVerifier()
    app.dependency_overrides[get_llm_client] = lambda: llm
    app.dependency_overrides[get_search_client] = lambda: searcher
    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)
