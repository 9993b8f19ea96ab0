"""FastAPI web application for tasksort."""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from tasksort.config import configure_logging, load_settings
from tasksort.engine.document import SortOutcome, SortStatus, sort_tasks_in_document
from tasksort.engine.sorting import sort_task_tree, sort_tasks
from tasksort.engine.status_cycles import get_next_status_for_settings, get_previous_status_for_settings
from tasksort.engine.status_rank import build_status_rank_table
from tasksort.models.settings import SortCriterion, SortSettings
from tasksort.models.status_cycle import NextStatusResult

configure_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="tasksort API",
    description="Sorts checkbox task lists by configurable criteria without breaking their nesting",
    version="0.1.0"
)

# In-memory settings snapshot; requests may override it per call
current_settings: SortSettings = load_settings()


# Request/response models
class SortDocumentRequest(BaseModel):
    """Request to sort the tasks of a markdown document."""
    text: str
    cursor: int = Field(0, ge=0, description="Character offset of the cursor")
    full_document: bool = Field(False, description="Sort the whole document regardless of cursor")
    file_path: str = ""
    settings: Optional[SortSettings] = None
    now: Optional[datetime] = Field(None, description="Reference time for overdue checks")


class SortTasksRequest(BaseModel):
    """Request to sort task records (list/table views)."""
    tasks: List[Dict[str, Any]]
    criteria: Optional[List[SortCriterion]] = Field(None, description="Defaults to the settings' criteria")
    recursive: bool = Field(False, description="Also sort each record's children")
    settings: Optional[SortSettings] = None
    now: Optional[datetime] = None


class SortTasksResponse(BaseModel):
    tasks: List[Dict[str, Any]]


class StepDirection(str, Enum):
    NEXT = "next"
    PREVIOUS = "previous"


class StatusStepRequest(BaseModel):
    mark: str = Field(..., min_length=1, max_length=1)
    direction: StepDirection = StepDirection.NEXT
    settings: Optional[SortSettings] = None


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/settings", response_model=SortSettings)
async def get_settings():
    """Current settings snapshot."""
    return current_settings


@app.put("/settings", response_model=SortSettings)
async def replace_settings(settings: SortSettings):
    """Replace the in-memory settings snapshot."""
    global current_settings
    current_settings = settings
    return current_settings


@app.post("/sort/document", response_model=SortOutcome)
async def sort_document(request: SortDocumentRequest):
    """Sort the tasks in the cursor's heading section (or the whole document)."""
    settings = request.settings or current_settings
    try:
        outcome = sort_tasks_in_document(
            request.text,
            settings,
            cursor=request.cursor,
            full_document=request.full_document,
            file_path=request.file_path,
            now=request.now,
        )
    except Exception as e:
        logger.error(f"Failed to sort document {request.file_path!r}: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to sort document: {str(e)}")

    if outcome.status == SortStatus.INVALID_RANGE:
        raise HTTPException(status_code=400, detail=outcome.message)
    return outcome


@app.post("/sort/tasks", response_model=SortTasksResponse)
async def sort_task_records(request: SortTasksRequest):
    """Sort task records, optionally including their children."""
    settings = request.settings or current_settings
    criteria = request.criteria if request.criteria is not None else settings.sort_criteria
    sorter = sort_task_tree if request.recursive else sort_tasks
    try:
        ordered = sorter(request.tasks, criteria, settings, now=request.now)
    except Exception as e:
        logger.error(f"Failed to sort {len(request.tasks)} tasks: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to sort tasks: {str(e)}")
    return SortTasksResponse(tasks=ordered)


@app.get("/status/rank-table", response_model=Dict[str, int])
async def status_rank_table():
    """Status rank table for the current settings."""
    return dict(build_status_rank_table(current_settings))


@app.post("/status/step", response_model=NextStatusResult)
async def step_status(request: StatusStepRequest):
    """Next or previous status for a mark, using its primary cycle (or the flat cycle)."""
    settings = request.settings or current_settings
    if request.direction == StepDirection.NEXT:
        result = get_next_status_for_settings(request.mark, settings)
    else:
        result = get_previous_status_for_settings(request.mark, settings)

    if result is None:
        raise HTTPException(status_code=404, detail=f"No status cycle contains mark {request.mark!r}")
    return result


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
