from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

import dateparser

from ..config import settings
from ..schemas import DatePattern

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
MONTHS = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)
NUMBER_WORDS = {
    "a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}

_WEEKDAY = r"mon(?:day)?|tue(?:s(?:day)?)?|wed(?:nesday)?|thu(?:r(?:s(?:day)?)?)?|fri(?:day)?|sat(?:urday)?|sun(?:day)?"
_FULL_WEEKDAY = "|".join(WEEKDAYS)
_MONTH = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)
_ORD = r"(?:st|nd|rd|th)?"
_COUNT = r"\d{1,3}|" + "|".join(NUMBER_WORDS)

# Alternatives are tried in order; longer phrases come before their prefixes.
DATE_PAT = re.compile(
    rf"""
    (?<![\#\w/])
    (?:
        (?P<day_after>day\s+after\s+tomorrow)
      | (?P<word>today|tonight|tomorrow|tmrw|tomor(?:r(?:o)?)?|yesterday)
      | (?P<span_mod>next|last)\s+(?P<span_unit>week|month|year)
      | (?P<weekend>(?:this\s+)?weekend)
      | (?P<wd_mod>next|this|last|on)\s+(?P<wd_name>{_WEEKDAY})\.?
      | in\s+(?P<in_count>{_COUNT})\s+(?P<in_unit>day|week|month|year)s?
      | (?P<md_month>{_MONTH})\.?\s+(?P<md_day>\d{{1,2}}){_ORD}(?:,?\s+(?P<md_year>\d{{4}}))?
      | (?P<dm_day>\d{{1,2}}){_ORD}\s+(?:of\s+)?(?P<dm_month>{_MONTH})\.?(?:,?\s+(?P<dm_year>\d{{4}}))?
      | (?P<iso>\d{{4}}-\d{{2}}-\d{{2}})
      | (?P<numeric>\d{{1,2}}/\d{{1,2}}(?:/(?:\d{{4}}|\d{{2}}))?)
      | (?P<weekday>{_FULL_WEEKDAY})
    )
    (?P<time>
        \s+(?:at\s+)?(?:\d{{1,2}}(?::\d{{2}})?\s?(?:am|pm)|noon|midnight)
      | \s+(?:morning|afternoon|evening|night)
    )?
    (?![\w/])
    """,
    re.IGNORECASE | re.VERBOSE,
)

# Words that make a relative phrase unambiguous.
RELATIVE_MARKER_PAT = re.compile(r"tomorrow|today|next|this", re.IGNORECASE)


def reference_now() -> datetime:
    """Current wall-clock time in the configured timezone, naive."""
    if settings.timezone:
        return datetime.now(ZoneInfo(settings.timezone)).replace(tzinfo=None)
    return datetime.now()


def _weekday_index(name: str) -> int:
    name = name.lower()
    return next(i for i, w in enumerate(WEEKDAYS) if w.startswith(name[:3]))


def _month_name(name: str) -> str:
    name = name.lower()
    return next(m for m in MONTHS if m.startswith(name[:3]))


def _dateparser_settings(now: datetime) -> dict:
    return {
        "PREFER_DATES_FROM": settings.prefer_dates_from,
        "RELATIVE_BASE": datetime.combine(now.date(), time.min),
        "DATE_ORDER": settings.date_order,
    }


def _parse_phrase(phrase: str, now: datetime) -> date | None:
    parsed = dateparser.parse(phrase, languages=["en"], settings=_dateparser_settings(now))
    return parsed.date() if parsed else None


def _spelled(d: date, with_year: bool) -> str:
    text = f"{MONTHS[d.month - 1].capitalize()} {d.day}"
    return f"{text}, {d.year}" if with_year else text


def _canonical(m: re.Match) -> tuple[str, bool] | None:
    """Phrase dateparser understands for this match, and whether day+month were stated."""
    g = m.groupdict()
    if g["day_after"]:
        return "day after tomorrow", False
    if g["word"]:
        word = g["word"].lower()
        return (word if word in ("today", "yesterday") else "tomorrow"), False
    if g["span_mod"]:
        return f"{g['span_mod'].lower()} {g['span_unit'].lower()}", False
    if g["in_count"]:
        raw = g["in_count"].lower()
        count = int(raw) if raw.isdigit() else NUMBER_WORDS[raw]
        unit = g["in_unit"].lower()
        return f"in {count} {unit}{'' if count == 1 else 's'}", False
    if g["md_month"] or g["dm_month"]:
        month = _month_name(g["md_month"] or g["dm_month"])
        day = int(g["md_day"] or g["dm_day"])
        year = g["md_year"] or g["dm_year"]
        return (f"{month} {day} {year}" if year else f"{month} {day}"), True
    if g["numeric"]:
        return g["numeric"], True
    if g["weekday"]:
        return g["weekday"].lower(), False
    return None


def _resolve(m: re.Match, today: date, now: datetime) -> tuple[date, str, bool] | None:
    """Resolve one grammar match to (date, normalized phrase, day+month stated)."""
    g = m.groupdict()

    # dateparser has no notion of these; resolved on Monday-start weeks
    if g["word"] and g["word"].lower() == "tonight":
        return today, "tonight", False

    if g["weekend"]:
        resolved = today if today.weekday() == 6 else today + timedelta(days=(5 - today.weekday()) % 7)
        return resolved, " ".join(g["weekend"].lower().split()), False

    if g["wd_mod"]:
        mod = g["wd_mod"].lower()
        target = _weekday_index(g["wd_name"])
        wd = today.weekday()
        if mod == "next":
            delta = 7 - wd + target
        elif mod == "this":
            delta = target - wd
        elif mod == "last":
            delta = target - wd - 7
        else:
            delta = (target - wd) % 7
        return today + timedelta(days=delta), f"{mod} {WEEKDAYS[target]}", False

    if g["iso"]:
        try:
            resolved = date.fromisoformat(g["iso"])
        except ValueError:
            return None
        return resolved, _spelled(resolved, True), True

    if g["weekday"] and _weekday_index(g["weekday"]) == today.weekday():
        return today, WEEKDAYS[today.weekday()], False

    canonical = _canonical(m)
    if canonical is None:
        return None
    phrase, stated = canonical
    resolved = _parse_phrase(phrase, now)
    if resolved is None:
        return None
    if g["md_month"] or g["dm_month"]:
        return resolved, _spelled(resolved, bool(g["md_year"] or g["dm_year"])), True
    if g["numeric"]:
        return resolved, _spelled(resolved, g["numeric"].count("/") == 2), True
    return resolved, phrase, stated


def display_for(resolved: date, today: date) -> str:
    if resolved == today:
        return "Today"
    if resolved == today + timedelta(days=1):
        return "Tomorrow"
    if (resolved - today).days <= 7:
        return f"{resolved:%A}, {resolved:%b} {resolved.day}"
    return f"{resolved:%b} {resolved.day}, {resolved.year}"


def _scan(text: str, now: datetime) -> list[DatePattern]:
    today = now.date()
    patterns: list[DatePattern] = []
    for m in DATE_PAT.finditer(text):
        hit = _resolve(m, today, now)
        if hit is None:
            continue
        resolved, normalized, stated = hit
        if resolved < today:
            logger.debug("Dropping past date %r -> %s", m.group(0), resolved)
            continue
        if m.group("time"):
            normalized = f"{normalized} {' '.join(m.group('time').lower().split())}"
        matched = m.group(0)
        high = stated or RELATIVE_MARKER_PAT.search(matched) is not None
        patterns.append(
            DatePattern(
                matched_text=matched,
                start_index=m.start(),
                end_index=m.end(),
                normalized_text=normalized,
                resolved_date=resolved.isoformat(),
                display_text=display_for(resolved, today),
                confidence="high" if high else "medium",
            )
        )
    return patterns


def extract_dates(text: str, now: datetime | None = None) -> list[DatePattern]:
    """
    Find date phrases in text and resolve each to a calendar day.
    Days before today (relative to `now`) are dropped; today is always kept.
    Never raises: a failure in the date engine yields no date patterns.
    """
    if not text.strip():
        return []
    try:
        return _scan(text, now or reference_now())
    except Exception:
        logger.warning("Date extraction failed for %r", text, exc_info=True)
        return []
