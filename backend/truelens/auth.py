# truelens/auth.py
"""Bearer-token guard backed by Firebase Authentication.

`require_user` is a FastAPI dependency: listing it in a handler's signature
runs verification before the handler body and short-circuits with a 401 on
failure.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import firebase_admin
from fastapi import Depends, Header, Request
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError

from .config import Settings
from .errors import Unauthenticated

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
FIREBASE_APP_NAME = "truelens"


@dataclass(frozen=True)
class AuthedUser:
    uid: str


class TokenVerifier(Protocol):
    def verify(self, token: str) -> str:
        """Return the token subject, raise on any verification failure."""
        ...


class FirebaseTokenVerifier:
    def __init__(self, service_account_path: str, project_id: Optional[str] = None):
        if Path(service_account_path).is_file():
            credential = credentials.Certificate(service_account_path)
        else:
            logger.warning(f"Service account file {service_account_path} not found, "
                           "using application default credentials")
            credential = credentials.ApplicationDefault()
        options = {"projectId": project_id} if project_id else None
        try:
            self.app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            self.app = firebase_admin.initialize_app(credential, options, name=FIREBASE_APP_NAME)

    def verify(self, token: str) -> str:
        decoded = auth.verify_id_token(token, app=self.app)
        return decoded["uid"]


def get_token_verifier(request: Request) -> TokenVerifier:
    state = request.app.state
    if getattr(state, "token_verifier", None) is None:
        settings: Settings = state.settings
        state.token_verifier = FirebaseTokenVerifier(
            settings.firebase_service_account_path,
            settings.firebase_project_id,
        )
    return state.token_verifier


def parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):].strip() or None


def require_user(
    authorization: Optional[str] = Header(default=None),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> AuthedUser:
    token = parse_bearer_token(authorization)
    if not token:
        raise Unauthenticated("No authorization token provided")

    try:
        uid = verifier.verify(token)
    except FirebaseError as e:
        logger.info(f"Rejected identity token: {e}")
        raise Unauthenticated("Invalid authorization token") from e
    except ValueError as e:
        # Also raised when the verifier has no project id configured
        logger.warning(f"Identity token could not be verified: {e}")
        raise Unauthenticated("Invalid authorization token") from e

    return AuthedUser(uid=uid)
