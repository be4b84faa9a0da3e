def pattern_key(kind: str, matched_text: str) -> str:
    """Dismissal key for a detected pattern, e.g. 'priority:!!'."""
    return f"{kind}:{matched_text}"