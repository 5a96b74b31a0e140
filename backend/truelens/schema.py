# truelens/schema.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional

class CamelModel(BaseModel):
    """Snake-case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# Required fields are optional here so that an empty or missing value
# produces the same 400 as a blank string.

class AnalyzeRequest(CamelModel):
    text: Optional[str] = None
    user_id: Optional[str] = None  # ignored, identity comes from the token
    url: Optional[str] = None

class AnalyzeResponse(CamelModel):
    reliability_score: int
    summary: List[str]
    claims: List[str]
    source_analysis: List[Any] = []
    success: bool = True

class ChatRequest(CamelModel):
    message: Optional[str] = None
    user_id: Optional[str] = None
    article_context: Optional[str] = None

class ChatResponse(CamelModel):
    response: str
    success: bool = True

class ReportRequest(CamelModel):
    text: Optional[str] = None
    report: Optional[str] = None
    user_id: Optional[str] = None
    reliability_score: Optional[int] = None

class ReportResponse(CamelModel):
    success: bool = True
    message: str

class HistoryItem(CamelModel):
    id: int
    user_id: str
    text: str
    claims: List[str]
    summary: List[str]
    reliability_score: int
    url: Optional[str] = None
    timestamp: datetime

class HistoryResponse(CamelModel):
    history: List[HistoryItem]
    success: bool = True

class HistoryEntryOut(CamelModel):
    score: int
    timestamp: datetime

class ProfileOut(CamelModel):
    user_id: str
    created_at: datetime
    history: Dict[str, HistoryEntryOut] = {}

class ProfileResponse(CamelModel):
    profile: ProfileOut
    success: bool = True

class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
