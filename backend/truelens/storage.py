# truelens/storage.py (persistence helpers)
from typing import Dict, List, Optional
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, Session, create_engine, select

from .models import (
    AnalysisRecord, ChatRecord, InaccuracyReport, ProfileHistoryEntry, ReportStatus, UserProfile,
)

def create_db_engine(database_url: str) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Handlers run in the server's thread pool
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=False, connect_args=connect_args)

def init_db(engine: Engine):
    SQLModel.metadata.create_all(engine)

def get_or_seed_profile(session: Session, user_id: str) -> UserProfile:
    profile = session.get(UserProfile, user_id)
    if profile:
        return profile
    try:
        profile = UserProfile(user_id=user_id)
        session.add(profile); session.commit()
    except IntegrityError:
        # A concurrent request seeded the same profile first
        session.rollback()
        profile = session.get(UserProfile, user_id)
    return profile

def save_analysis(session: Session, user_id: str, text: str, claims: List[str], summary: List[str],
                  reliability_score: int, url: Optional[str] = None) -> AnalysisRecord:
    record = AnalysisRecord(user_id=user_id, text=text, claims=claims, summary=summary,
                            reliability_score=reliability_score, url=url)
    session.add(record); session.commit(); session.refresh(record)
    return record

def append_history(session: Session, user_id: str, analysis: AnalysisRecord) -> ProfileHistoryEntry:
    """Add history[analysis.id] to the user's profile without touching the other entries."""
    analysis_id, score = analysis.id, analysis.reliability_score
    get_or_seed_profile(session, user_id)
    entry = ProfileHistoryEntry(analysis_id=analysis_id, user_id=user_id, score=score)
    session.add(entry); session.commit(); session.refresh(entry)
    return entry

def save_chat(session: Session, user_id: str, user_message: str, assistant_response: str,
              article_context: Optional[str] = None) -> ChatRecord:
    record = ChatRecord(user_id=user_id, user_message=user_message,
                        assistant_response=assistant_response, article_context=article_context)
    session.add(record); session.commit(); session.refresh(record)
    return record

def save_report(session: Session, user_id: str, article_text: str, report: str,
                reliability_score: Optional[int] = None) -> InaccuracyReport:
    record = InaccuracyReport(user_id=user_id, article_text=article_text, report=report,
                              reliability_score=reliability_score, status=ReportStatus.PENDING)
    session.add(record); session.commit(); session.refresh(record)
    return record

def list_history(session: Session, user_id: str, limit: int = 50) -> List[AnalysisRecord]:
    statement = (
        select(AnalysisRecord)
        .where(AnalysisRecord.user_id == user_id)
        .order_by(AnalysisRecord.timestamp.desc())
        .limit(limit)
    )
    return list(session.exec(statement).all())

def get_profile(session: Session, user_id: str) -> Optional[Dict]:
    profile = session.get(UserProfile, user_id)
    if not profile:
        return None
    entries = session.exec(
        select(ProfileHistoryEntry).where(ProfileHistoryEntry.user_id == user_id)
    ).all()
    return {
        "user_id": profile.user_id,
        "created_at": profile.created_at,
        "history": {
            str(e.analysis_id): {"score": e.score, "timestamp": e.timestamp} for e in entries
        },
    }
