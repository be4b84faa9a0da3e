import re
from collections.abc import Iterable, Mapping, Sequence

from ..schemas import Label, LabelPattern

LABEL_PAT = re.compile(r"#(\w+)")
# "#p0".."#p3" are reported as priority markers only, never also as labels
HASH_PRIORITY_PAT = re.compile(r"p[0-3]", re.IGNORECASE)


def coerce_labels(labels: Iterable[Label | Mapping]) -> list[Label]:
    return [lbl if isinstance(lbl, Label) else Label.model_validate(lbl) for lbl in labels]


def find_label(tag: str, labels: Sequence[Label]) -> Label | None:
    """Exact case-insensitive name match first, then first name starting with tag."""
    tag = tag.lower()
    for lbl in labels:
        if lbl.name.lower() == tag:
            return lbl
    for lbl in labels:
        if lbl.name.lower().startswith(tag):
            return lbl
    return None


def extract_labels(text: str, known_labels: Iterable[Label | Mapping] = ()) -> list[LabelPattern]:
    labels = coerce_labels(known_labels)
    patterns: list[LabelPattern] = []
    for m in LABEL_PAT.finditer(text):
        tag = m.group(1)
        if HASH_PRIORITY_PAT.fullmatch(tag):
            continue
        match = find_label(tag, labels)
        patterns.append(
            LabelPattern(
                matched_text=m.group(0),
                start_index=m.start(),
                end_index=m.end(),
                label_name=match.name if match else tag.lower(),
                label_id=match.id if match else None,
                is_existing=match is not None,
            )
        )
    return patterns
