from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging

import secure
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .analysis import analyze_article
from .auth import AuthedUser, require_user
from .chat import chat_reply
from .clients.llm_client import LLMClient
from .config import Settings, settings as default_settings
from .deps import get_llm_client, get_search_client, get_session, get_settings
from .errors import InvalidInput, TrueLensError, Unauthenticated, NotFound, UpstreamFailure
from .schema import (
    AnalyzeRequest, AnalyzeResponse, ChatRequest, ChatResponse, HealthResponse, HistoryItem,
    HistoryResponse, ProfileOut, ProfileResponse, ReportRequest, ReportResponse,
)
from .scoring import ClaimSearcher
from .storage import create_db_engine, get_profile, init_db, list_history, save_report


logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# chrome-extension://<id> and any local dev server
EXTENSION_ORIGIN_REGEX = r"^(chrome-extension://.*|http://localhost(:\d+)?)$"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(app.state.engine)
    logger.info("TrueLensAI backend started")
    yield


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_error_handlers(app: FastAPI):
    @app.exception_handler(TrueLensError)
    async def truelens_error_handler(request: Request, exc: TrueLensError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected request body on {request.url.path}: {exc.errors()}")
        return _error(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error(404, "Endpoint not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Error: {exc}", exc_info=exc)
        return _error(500, "Internal server error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(title="TrueLensAI API", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = create_db_engine(settings.database_url)

    # Rate limiting, per client address
    limiter = Limiter(
        key_func=get_remote_address,
        application_limits=[settings.rate_limit],
        enabled=settings.rate_limit_enabled,
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_origin_regex=EXTENSION_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers on every response
    secure_headers = secure.Secure.with_default_headers()

    @app.middleware("http")
    async def set_secure_headers(request: Request, call_next):
        response = await call_next(request)
        await secure_headers.set_headers_async(response)
        return response

    register_error_handlers(app)

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc))

    # ---------- ANALYZE ARTICLE ----------
    @app.post("/api/analyze", response_model=AnalyzeResponse)
    def analyze(
        req: AnalyzeRequest,
        user: AuthedUser = Depends(require_user),
        llm: LLMClient = Depends(get_llm_client),
        searcher: Optional[ClaimSearcher] = Depends(get_search_client),
        session: Session = Depends(get_session),
        app_settings: Settings = Depends(get_settings),
    ):
        result = analyze_article(
            req.text, user.uid, req.url,
            llm=llm, searcher=searcher, session=session, settings=app_settings,
        )
        return AnalyzeResponse(**result)

    # ---------- CHAT ----------
    @app.post("/api/chat", response_model=ChatResponse)
    def chat(
        req: ChatRequest,
        user: AuthedUser = Depends(require_user),
        llm: LLMClient = Depends(get_llm_client),
        session: Session = Depends(get_session),
    ):
        response = chat_reply(req.message, user.uid, req.article_context, llm=llm, session=session)
        return ChatResponse(response=response)

    # ---------- REPORT INACCURACY ----------
    @app.post("/api/report-inaccuracy", response_model=ReportResponse)
    def report_inaccuracy(
        req: ReportRequest,
        user: AuthedUser = Depends(require_user),
        session: Session = Depends(get_session),
        app_settings: Settings = Depends(get_settings),
    ):
        if not req.report or not req.report.strip():
            raise InvalidInput("Report text is required")
        try:
            save_report(
                session,
                user_id=user.uid,
                article_text=(req.text or "")[:app_settings.excerpt_char_limit],
                report=req.report,
                reliability_score=req.reliability_score,
            )
        except Exception as e:
            logger.exception(f"Report error: {e}")
            raise UpstreamFailure("Failed to submit report") from e
        return ReportResponse(message="Report submitted successfully")

    # ---------- USER HISTORY ----------
    @app.get("/api/user/history", response_model=HistoryResponse)
    def user_history(
        user: AuthedUser = Depends(require_user),
        session: Session = Depends(get_session),
        app_settings: Settings = Depends(get_settings),
    ):
        try:
            records = list_history(session, user.uid, limit=app_settings.history_limit)
        except Exception as e:
            logger.exception(f"History error: {e}")
            raise UpstreamFailure("Failed to fetch history") from e
        return HistoryResponse(history=[HistoryItem.model_validate(r, from_attributes=True) for r in records])

    # ---------- USER PROFILE ----------
    @app.get("/api/user/profile", response_model=ProfileResponse)
    def user_profile(
        user: AuthedUser = Depends(require_user),
        session: Session = Depends(get_session),
    ):
        if not user.uid:
            raise Unauthenticated("Unauthorized")
        try:
            profile = get_profile(session, user.uid)
        except Exception as e:
            logger.exception(f"Profile error: {e}")
            raise UpstreamFailure("Failed to fetch profile") from e
        if profile is None:
            raise NotFound("User not found")
        return ProfileResponse(profile=ProfileOut.model_validate(profile))

    return app


app = create_app()


def run():
    logger.info(f"TrueLensAI backend running on http://localhost:{default_settings.port}")
    uvicorn.run("truelens.main:app", host="0.0.0.0", port=default_settings.port)


if __name__ == "__main__":
    run()
