# truelens/models.py
from enum import Enum
from sqlalchemy import Column, DateTime, JSON
from sqlmodel import SQLModel, Field
from typing import Optional, List
from datetime import datetime, timezone

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class AnalysisRecord(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    text: str = ""  # excerpt of the submitted article
    claims: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    summary: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    reliability_score: int
    url: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)

class UserProfile(SQLModel, table=True):
    user_id: str = Field(primary_key=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

class ProfileHistoryEntry(SQLModel, table=True):
    # One row per key of the profile's history map
    analysis_id: int = Field(primary_key=True, foreign_key="analysisrecord.id")
    user_id: str = Field(foreign_key="userprofile.user_id", index=True)
    score: int
    timestamp: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

class ChatRecord(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    user_message: str
    assistant_response: str
    article_context: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

class ReportStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    DISMISSED = "dismissed"

class InaccuracyReport(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    article_text: str = ""
    report: str
    reliability_score: Optional[int] = None
    status: ReportStatus = ReportStatus.PENDING
    timestamp: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
