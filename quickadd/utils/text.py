import re
from collections.abc import Iterable

_WS_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def merge_spans(spans: Iterable[tuple[int, int]]) -> list[tuple[int, int]]:
    """Union of half-open spans, ascending and non-overlapping."""
    merged: list[tuple[int, int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def remove_spans(text: str, spans: Iterable[tuple[int, int]]) -> str:
    """Cut every span out of text, then collapse whitespace."""
    out = text
    # highest offset first, so the offsets still to be cut stay valid
    for start, end in reversed(merge_spans(spans)):
        out = out[:start] + out[end:]
    return collapse_whitespace(out)


def locate(text: str, needle: str, hint: int | None = None) -> int:
    """Index of needle in text, preferring the occurrence at hint. -1 if absent."""
    if not needle:
        return -1
    if hint is not None and text[hint : hint + len(needle)] == needle:
        return hint
    return text.find(needle)
