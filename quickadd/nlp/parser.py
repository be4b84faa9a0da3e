from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime

from ..schemas import Label, ParsedPatterns, TaskDraft
from ..utils.text import collapse_whitespace, remove_spans
from .dates import extract_dates
from .labels import extract_labels
from .priorities import extract_priorities

logger = logging.getLogger(__name__)


def parse_task_input(
    text: str,
    known_labels: Iterable[Label | Mapping] = (),
    now: datetime | None = None,
) -> ParsedPatterns:
    """
    Detect dates, #labels and priority markers in a task title being typed.

    - dates via the date grammar (past days dropped, today kept)
    - labels via #tag, resolved against known_labels (exact name, then prefix)
    - priority via !/!!/!!!, #p0..#p3 and p:0..p:3
    - clean_text is the title with every detected span removed

    Pure: the same arguments always give an equal result.
    """
    if not text.strip():
        return ParsedPatterns()

    dates = extract_dates(text, now=now)
    labels = extract_labels(text, known_labels)
    priorities = extract_priorities(text)

    spans = [(p.start_index, p.end_index) for p in (*dates, *labels, *priorities)]
    clean = remove_spans(text, spans)

    logger.debug(
        "Parsed %d dates, %d labels, %d priorities from %r",
        len(dates), len(labels), len(priorities), text,
    )
    return ParsedPatterns(
        dates=dates,
        labels=labels,
        priorities=priorities,
        clean_text=clean,
        has_any_pattern=bool(spans),
    )


def quick_add(
    text: str,
    known_labels: Iterable[Label | Mapping] = (),
    now: datetime | None = None,
) -> TaskDraft:
    """Accept every detected pattern at once and return the resulting task."""
    parsed = parse_task_input(text, known_labels, now=now)

    due: date | None = None
    if parsed.dates:
        due = date.fromisoformat(parsed.dates[0].resolved_date)

    label_ids = [p.label_id for p in parsed.labels if p.label_id]
    new_labels = [p.label_name for p in parsed.labels if not p.is_existing]

    return TaskDraft(
        title=parsed.clean_text or collapse_whitespace(text),
        due_date=due,
        label_ids=list(dict.fromkeys(label_ids)),
        new_labels=list(dict.fromkeys(new_labels)),
        priority=parsed.priorities[0].priority_level if parsed.priorities else 0,
    )
