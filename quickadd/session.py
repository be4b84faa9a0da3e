from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime

from .nlp.labels import coerce_labels
from .nlp.parser import parse_task_input
from .schemas import (
    AppliedSuggestion,
    DatePattern,
    Label,
    LabelPattern,
    ParsedPatterns,
    PriorityPattern,
    TaskDraft,
)
from .utils.text import collapse_whitespace, locate

logger = logging.getLogger(__name__)


def apply_suggestion(
    text: str,
    pattern: DatePattern | LabelPattern | PriorityPattern,
    cursor: int | None = None,
) -> AppliedSuggestion:
    """
    Rewrite the current input for an accepted pattern.

    The text may have changed since it was parsed, so the pattern's text is
    looked up again rather than trusting its offsets. Dates are replaced by
    their normalized spelling, priority markers are removed, labels leave the
    text alone.
    """
    if isinstance(pattern, LabelPattern):
        return AppliedSuggestion(
            kind="label",
            text=text,
            cursor=len(text) if cursor is None else cursor,
            label_id=pattern.label_id,
            label_name=pattern.label_name,
        )

    idx = locate(text, pattern.matched_text, hint=pattern.start_index)
    if idx < 0:
        logger.debug("Pattern %r no longer in input; committing value only", pattern.key)
        new_text, new_cursor = text, (len(text) if cursor is None else cursor)
    elif isinstance(pattern, DatePattern):
        before, after = text[:idx], text[idx + len(pattern.matched_text) :]
        new_text = before + pattern.normalized_text + after
        new_cursor = len(before) + len(pattern.normalized_text)
    else:
        before = collapse_whitespace(text[:idx])
        after = collapse_whitespace(text[idx + len(pattern.matched_text) :])
        sep = " " if before and after else ""
        new_text = before + sep + after
        new_cursor = len(before) + len(sep)

    if isinstance(pattern, DatePattern):
        return AppliedSuggestion(
            kind="date",
            text=new_text,
            cursor=new_cursor,
            due_date=date.fromisoformat(pattern.resolved_date),
        )
    return AppliedSuggestion(
        kind="priority",
        text=new_text,
        cursor=new_cursor,
        priority=pattern.priority_level,
    )


def filter_dismissed(parsed: ParsedPatterns, dismissed: Iterable[str]) -> ParsedPatterns:
    """Drop patterns whose key the user already dismissed."""
    keys = set(dismissed)
    if not keys:
        return parsed
    dates = [p for p in parsed.dates if p.key not in keys]
    labels = [p for p in parsed.labels if p.key not in keys]
    priorities = [p for p in parsed.priorities if p.key not in keys]
    return parsed.model_copy(
        update={
            "dates": dates,
            "labels": labels,
            "priorities": priorities,
            "has_any_pattern": bool(dates or labels or priorities),
        }
    )


class ComposeSession:
    """
    State for composing one task title: the text, which suggestions were
    dismissed, and the values committed by accepted ones.
    Emptying the input or submitting starts over.
    """

    def __init__(self, known_labels: Iterable[Label | Mapping] = ()) -> None:
        self.known_labels: list[Label] = coerce_labels(known_labels)
        self.dismissed: set[str] = set()
        self._reset_values()

    def _reset_values(self) -> None:
        self.text = ""
        self.cursor = 0
        self.due_date: date | None = None
        self.accepted_dates: set[str] = set()
        self.label_ids: list[str] = []
        self.new_labels: list[str] = []
        self.priority = 0

    def set_text(self, text: str, cursor: int | None = None) -> None:
        self.text = text
        self.cursor = len(text) if cursor is None else cursor
        if not text.strip():
            self.dismissed.clear()

    def suggestions(self, now: datetime | None = None) -> ParsedPatterns:
        parsed = filter_dismissed(parse_task_input(self.text, self.known_labels, now=now), self.dismissed)
        # accepted date phrases stay in the text, accepted labels keep their #tag
        dates = [
            p
            for p in parsed.dates
            if p.matched_text not in self.accepted_dates and p.normalized_text not in self.accepted_dates
        ]
        labels = [
            p
            for p in parsed.labels
            if not ((p.label_id and p.label_id in self.label_ids) or (not p.is_existing and p.label_name in self.new_labels))
        ]
        if dates == parsed.dates and labels == parsed.labels:
            return parsed
        return parsed.model_copy(
            update={
                "dates": dates,
                "labels": labels,
                "has_any_pattern": bool(dates or labels or parsed.priorities),
            }
        )

    def dismiss(self, pattern: DatePattern | LabelPattern | PriorityPattern) -> None:
        self.dismissed.add(pattern.key)

    def dismiss_all(self, patterns: Iterable[DatePattern | LabelPattern | PriorityPattern]) -> None:
        self.dismissed.update(p.key for p in patterns)

    def accept(self, pattern: DatePattern | LabelPattern | PriorityPattern) -> AppliedSuggestion:
        applied = apply_suggestion(self.text, pattern, cursor=self.cursor)
        self.text, self.cursor = applied.text, applied.cursor
        if applied.kind == "date":
            self.due_date = applied.due_date
            self.accepted_dates.update((pattern.matched_text, pattern.normalized_text))
        elif applied.kind == "priority":
            self.priority = applied.priority or 0
        elif applied.label_id:
            if applied.label_id not in self.label_ids:
                self.label_ids.append(applied.label_id)
        elif applied.label_name and applied.label_name not in self.new_labels:
            self.new_labels.append(applied.label_name)
        return applied

    def submit(self) -> TaskDraft:
        draft = TaskDraft(
            title=collapse_whitespace(self.text),
            due_date=self.due_date,
            label_ids=list(self.label_ids),
            new_labels=list(self.new_labels),
            priority=self.priority,
        )
        self._reset_values()
        self.dismissed.clear()
        return draft
