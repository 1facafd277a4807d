from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ExportFile(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8-sig")
    filename: str
    content_b64: str


class ReportSummary(BaseModel):
    records: int = 0
    skipped: int = 0
    warnings: int = 0
    errors: int = 0
    deterministic: bool = True


class ReportItem(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class ConversionReport(BaseModel):
    summary: ReportSummary
    normalizations: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[ReportItem] = Field(default_factory=list)
    errors: List[ReportItem] = Field(default_factory=list)


class ConvertResponse(BaseModel):
    shape: str
    layout: str
    html: str
    records: List[Dict[str, str]] = Field(default_factory=list)
    export: ExportFile
    report: ConversionReport


class FieldInfo(BaseModel):
    label: str
    role: str


class ShapeInfo(BaseModel):
    key: str
    title: str
    fields_per_record: int
    fields: List[FieldInfo]
    whitespace_run: Optional[int] = Field(default=None, examples=[10])
    line_groups: bool = False


class HealthResponse(BaseModel):
    ok: bool = True
