from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class AddCodesRequest(BaseModel):
    # plain strings or {"code": ..., "league_count": ...} objects
    codes: list[Any] = Field(default_factory=list)


class AddCodesResponse(BaseModel):
    success: bool
    message: str
    added: int
    skipped: int
    errors: int
    details: dict[str, list[Any]]


class ValidCodeOut(BaseModel):
    code: str
    league_count: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ValidCodeListResponse(BaseModel):
    success: bool
    codes: list[ValidCodeOut]
    total: int
