from __future__ import annotations

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class Outcome(str, Enum):
    SUBSTITUTED = "substituted"
    COLUMN_NOT_FOUND = "column_not_found"


class ReportItem(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class SubstitutionResult(BaseModel):
    outcome: Outcome
    column_heading: str
    column_index: Optional[int] = Field(default=None, examples=[2])
    encoding: str = Field(default="utf-8")
    rows: int = 0
    substitutions: int = 0
    output_written: bool = False
    warnings: List[ReportItem] = Field(default_factory=list)


class SubstitutedCsv(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8")
    content_b64: str


class SubstituteResponse(BaseModel):
    substituted_csv: Optional[SubstitutedCsv] = None
    result: SubstitutionResult

class HealthResponse(BaseModel):
    ok: bool = True
