from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

class StatsRequest(BaseModel):
    usernames: Optional[List[str]] = None
    startDate: Optional[str] = None

class ErrorResponse(BaseModel):
    error: str

class Review(BaseModel):
    id: int
    user: Optional[str] = None
    state: Optional[str] = None

class ReviewComment(BaseModel):
    user: str
    body: str
    created_at: datetime
    updated_at: datetime

class PullRequestSummary(BaseModel):
    title: str
    number: int
    created_by: str
    url: str
    state: str
    created_at: datetime
    updated_at: datetime
    closed_at: Optional[datetime] = None
    reviewComments: List[ReviewComment] = Field(default_factory=list)

class StatsReport(BaseModel):
    totalPRs: int
    totalComments: int
    teamPrs: List[PullRequestSummary]
