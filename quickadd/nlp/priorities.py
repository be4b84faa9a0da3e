import re
from collections.abc import Iterator

from ..schemas import PriorityPattern

# One pattern per syntax, scanned in this order.
EXCLAMATION_PAT = re.compile(r"(?<!!)(!+)(?=\s|$)")
HASH_PRIORITY_PAT = re.compile(r"#p([0-3])\b", re.IGNORECASE)
COLON_PRIORITY_PAT = re.compile(r"\bp:([0-3])\b", re.IGNORECASE)

PRIORITY_DISPLAY = {
    3: "High priority",
    2: "Medium priority",
    1: "Low priority",
    0: "No priority",
}


def _scan(text: str) -> Iterator[PriorityPattern]:
    for m in EXCLAMATION_PAT.finditer(text):
        level = min(len(m.group(1)), 3)
        yield _pattern(m, level)
    for pat in (HASH_PRIORITY_PAT, COLON_PRIORITY_PAT):
        for m in pat.finditer(text):
            yield _pattern(m, int(m.group(1)))


def _pattern(m: re.Match, level: int) -> PriorityPattern:
    return PriorityPattern(
        matched_text=m.group(0),
        start_index=m.start(),
        end_index=m.end(),
        priority_level=level,
        display_text=PRIORITY_DISPLAY[level],
    )


def extract_priorities(text: str) -> list[PriorityPattern]:
    """
    Priority markers: '!'..'!!!' (longer runs cap at 3), '#p0'..'#p3', 'p:0'..'p:3'.
    Matches with an identical span are reported once; the first syntax wins.
    """
    seen: set[tuple[int, int]] = set()
    out: list[PriorityPattern] = []
    for p in _scan(text):
        span = (p.start_index, p.end_index)
        if span in seen:
            continue
        seen.add(span)
        out.append(p)
    return out
