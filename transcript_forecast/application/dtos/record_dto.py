"""
Application DTOs - Transcript Records

Input contract supplied by the surrounding data layer.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TranscriptRecordDTO(BaseModel):
    """One client's transcript count for one month."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    client_name: str = Field(alias="clientName", min_length=1)
    month: str = Field(description="Month label formatted as YYYY-MM")
    transcript_count: int = Field(alias="transcriptCount", ge=0)
    updated_at: Optional[datetime] = Field(
        default=None,
        alias="updatedAt",
        description="Last modification time, used to resolve duplicate months",
    )
