from datetime import date
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .utils.ids import pattern_key


class Label(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    name: str
    color: str | None = None


class PatternBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    matched_text: str
    start_index: int = Field(..., ge=0)
    end_index: int = Field(..., ge=0)  # exclusive

    @computed_field  # type: ignore[prop-decorator]
    @property
    def key(self) -> str:
        """Dismissal key, stable for as long as the matched text is unchanged."""
        return pattern_key(self.kind, self.matched_text)  # type: ignore[attr-defined]


class DatePattern(PatternBase):
    kind: Literal["date"] = "date"
    normalized_text: str
    resolved_date: str  # YYYY-MM-DD
    display_text: str
    confidence: Literal["high", "medium"]


class LabelPattern(PatternBase):
    kind: Literal["label"] = "label"
    label_name: str
    label_id: str | None = None
    is_existing: bool = False


class PriorityPattern(PatternBase):
    kind: Literal["priority"] = "priority"
    priority_level: int = Field(..., ge=0, le=3)
    display_text: str


Pattern = Annotated[DatePattern | LabelPattern | PriorityPattern, Field(discriminator="kind")]


class ParsedPatterns(BaseModel):
    model_config = ConfigDict(frozen=True)

    dates: list[DatePattern] = Field(default_factory=list)
    labels: list[LabelPattern] = Field(default_factory=list)
    priorities: list[PriorityPattern] = Field(default_factory=list)
    clean_text: str = ""
    has_any_pattern: bool = False


class AppliedSuggestion(BaseModel):
    """Input text after accepting one suggestion, plus the value to commit."""

    kind: Literal["date", "label", "priority"]
    text: str
    cursor: int
    due_date: date | None = None
    label_id: str | None = None
    label_name: str | None = None
    priority: int | None = None


class TaskDraft(BaseModel):
    title: str
    due_date: date | None = None
    label_ids: list[str] = Field(default_factory=list)
    new_labels: list[str] = Field(default_factory=list)  # names with no existing label
    priority: int = Field(0, ge=0, le=3)
