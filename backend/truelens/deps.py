# truelens/deps.py
"""Request-scoped collaborators, overridable through `app.dependency_overrides`.

Everything is built from the settings the app was created with
(`app.state.settings`) and cached on `app.state`.
"""
from typing import Iterator, Optional
from fastapi import Depends, Request
from sqlmodel import Session

from .clients.llm_client import LLMClient
from .clients.search_client import SerperClient
from .config import Settings

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_llm_client(request: Request, settings: Settings = Depends(get_settings)) -> LLMClient:
    state = request.app.state
    if getattr(state, "llm_client", None) is None:
        state.llm_client = LLMClient(
            provider=settings.llm_provider,
            model=settings.llm_model,
            api_key=settings.google_generative_ai_api_key,
            log_calls=settings.log_llm_calls,
        )
    return state.llm_client

def get_search_client(request: Request, settings: Settings = Depends(get_settings)) -> Optional[SerperClient]:
    if not settings.serper_api_key:
        return None
    state = request.app.state
    if getattr(state, "search_client", None) is None:
        state.search_client = SerperClient(api_key=settings.serper_api_key, timeout=settings.search_timeout)
    return state.search_client

def get_session(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session
