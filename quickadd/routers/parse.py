from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ..nlp.parser import parse_task_input
from ..schemas import AppliedSuggestion, Label, ParsedPatterns, Pattern
from ..session import apply_suggestion, filter_dismissed

router = APIRouter()


class ParseIn(BaseModel):
    text: str
    labels: list[Label] = Field(default_factory=list)
    # keys ("kind:matched_text") the user dismissed while composing this input
    dismissed: list[str] = Field(default_factory=list)
    now: datetime | None = None


class ApplyIn(BaseModel):
    text: str
    pattern: Pattern
    cursor: int | None = None


@router.post("", response_model=ParsedPatterns)
def parse(payload: ParseIn) -> ParsedPatterns:
    parsed = parse_task_input(payload.text, payload.labels, now=payload.now)
    return filter_dismissed(parsed, payload.dismissed)


@router.post("/apply", response_model=AppliedSuggestion)
def apply(payload: ApplyIn) -> AppliedSuggestion:
    return apply_suggestion(payload.text, payload.pattern, cursor=payload.cursor)
