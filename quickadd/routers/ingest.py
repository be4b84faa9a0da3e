from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ..nlp.parser import quick_add
from ..schemas import Label, TaskDraft

router = APIRouter()


class IngestIn(BaseModel):
    text: str = Field(..., min_length=1)
    labels: list[Label] = Field(default_factory=list)
    now: datetime | None = None


@router.post("", response_model=TaskDraft)
def ingest(payload: IngestIn) -> TaskDraft:
    return quick_add(payload.text, payload.labels, now=payload.now)
