import os
import logging
from typing import List, Optional

from fastapi import APIRouter, UploadFile, File, HTTPException, Depends, Response
from pydantic import BaseModel, ConfigDict, Field

from core import TabularParser, MODEL_TYPES, Orchestrator, AggregateResult
from core.errors import EmptyDatasetError, ProcessingError
from core.exporters import EXPORTERS
from utils.data_validator import DataValidator
from utils.dependencies import get_orchestrator

logger = logging.getLogger(__name__)
router = APIRouter()

# ── Config ────────────────────────────────────────────────────────────────────

MAX_FILE_SIZE_MB = int(os.getenv("MAX_FILE_SIZE_MB", "50"))
PREVIEW_ROWS = 5


# ── Schemas ───────────────────────────────────────────────────────────────────

class ProcessRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data: List[List[str]]
    selected_model: Optional[str] = Field(default=None, alias="selectedModel")
    task: str = ""


# ── Endpoints ─────────────────────────────────────────────────────────────────

@router.post("/upload")
async def upload_dataset(file: UploadFile = File(...)):
    """
    Read an uploaded CSV/TSV as plain text and return the parsed rows.
    The client keeps the rows and sends them back to /process; re-uploading
    simply replaces them.
    """
    try:
        raw = await file.read()
    except Exception as e:
        logger.error(f"Upload read failed for {file.filename}: {e}", exc_info=True)
        raise HTTPException(status_code=400, detail="Error reading file")

    val = DataValidator(max_file_size_mb=MAX_FILE_SIZE_MB).validate(file.filename or "", len(raw))
    if not val['valid']:
        raise HTTPException(status_code=400, detail=val['error'])

    data = TabularParser.parse(TabularParser.decode(raw))
    logger.info(f"Parsed upload {file.filename}: {len(data)} rows")
    return {
        "filename": file.filename,
        "rows": len(data),
        "columns": len(data[0]) if data else 0,
        "data": data,
        "preview": TabularParser.sample(data, PREVIEW_ROWS),
    }


@router.post("/process")
def process_dataset(req: ProcessRequest, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """
    Ask the completion service for cleaning steps, a chart and a model script.
    Individual request failures come back as placeholder content; only a
    failure of the whole batch returns an error.
    """
    try:
        result = orchestrator.process(req.data, selected_model=req.selected_model or None,
                                      task=req.task)
    except EmptyDatasetError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProcessingError as e:
        logger.error(f"Processing failed (task={e.task})")
        raise HTTPException(status_code=500, detail=str(e))
    return result.to_response()


@router.get("/models")
def list_models():
    return MODEL_TYPES


@router.post("/export/{kind}")
def export_result(kind: str, result: AggregateResult):
    exporter = EXPORTERS.get(kind)
    if exporter is None:
        raise HTTPException(status_code=404, detail=f"Unknown export '{kind}'")
    out = exporter(result)
    return Response(
        content=out.content,
        media_type=out.media_type,
        headers={"Content-Disposition": f'attachment; filename="{out.filename}"'},
    )
