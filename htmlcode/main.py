import logging
from typing import List

from fastapi import FastAPI, UploadFile, File, HTTPException, Query

from .config import configure_logging, get_settings
from .convert import convert_upload_bytes
from .errors import EmptyInputError, UnknownShapeError
from .models import ConvertResponse, FieldInfo, HealthResponse, ShapeInfo
from .shapes import SHAPES, get_shape

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="htmlcode",
    description="Deterministic punctuation-to-HTML-code conversion for company data records",
    version="0.1.0",
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.get("/shapes", response_model=List[ShapeInfo])
def shapes():
    return [
        {
            "key": shape.key,
            "title": shape.title,
            "fields_per_record": shape.arity,
            "fields": [
                FieldInfo(label=label, role=role.value)
                for label, role in zip(shape.labels, shape.roles)
            ],
            "whitespace_run": shape.whitespace_run,
            "line_groups": shape.line_groups,
        }
        for shape in SHAPES
    ]

@app.post("/convert", response_model=ConvertResponse)
async def convert(shape: str = Query(...), file: UploadFile = File(...)):
    settings = get_settings()

    try:
        record_shape = get_shape(shape)
    except UnknownShapeError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    filename = (file.filename or "").lower()
    if not filename.endswith(settings.allowed_extensions):
        raise HTTPException(status_code=422, detail="Only CSV or TXT files are supported")

    raw = await file.read()
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File is too large")

    try:
        return convert_upload_bytes(
            raw, record_shape, strip_excel_metadata=settings.strip_excel_metadata
        )
    except EmptyInputError as exc:
        logger.info("rejected %s: %s", file.filename, exc.message)
        raise HTTPException(status_code=422, detail=exc.message)
