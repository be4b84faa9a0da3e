from datetime import date, datetime

from quickadd.nlp.parser import parse_task_input
from quickadd.session import ComposeSession, apply_suggestion, filter_dismissed

NOW = datetime(2025, 6, 10, 9, 0)  # a Tuesday
LABELS = [{"id": "9", "name": "errands", "color": None}]


def test_accepting_priority_removes_marker():
    text = "ship it !! now"
    [p] = parse_task_input(text, now=NOW).priorities
    applied = apply_suggestion(text, p)
    assert applied.text == "ship it now"
    assert applied.cursor == len("ship it ")
    assert applied.priority == 2
    assert applied.kind == "priority"


def test_accepting_trailing_priority():
    text = "ship it #p3"
    [p] = parse_task_input(text, now=NOW).priorities
    applied = apply_suggestion(text, p)
    assert applied.text == "ship it"
    assert applied.cursor == len("ship it")


def test_accepting_date_replaces_with_normalized_text():
    text = "call mom tomor"
    [d] = parse_task_input(text, now=NOW).dates
    applied = apply_suggestion(text, d)
    assert applied.text == "call mom tomorrow"
    assert applied.cursor == len("call mom tomorrow")
    assert applied.due_date == date(2025, 6, 11)


def test_accepting_uses_current_text_not_stale_offsets():
    [p] = parse_task_input("ship !! it", now=NOW).priorities
    applied = apply_suggestion("please ship !! it", p)
    assert applied.text == "please ship it"
    assert applied.cursor == len("please ship ")


def test_accepting_pattern_no_longer_in_text_keeps_text():
    [p] = parse_task_input("ship it !!", now=NOW).priorities
    applied = apply_suggestion("ship it", p, cursor=3)
    assert applied.text == "ship it"
    assert applied.cursor == 3
    assert applied.priority == 2


def test_accepting_label_leaves_text_alone():
    text = "Buy milk #errands"
    [lbl] = parse_task_input(text, LABELS, now=NOW).labels
    applied = apply_suggestion(text, lbl)
    assert applied.text == text
    assert applied.label_id == "9"
    assert applied.label_name == "errands"


def test_filter_dismissed():
    parsed = parse_task_input("Buy milk tomorrow !!", now=NOW)
    filtered = filter_dismissed(parsed, ["priority:!!"])
    assert filtered.priorities == []
    assert len(filtered.dates) == 1
    assert filtered.has_any_pattern
    assert filtered.clean_text == parsed.clean_text

    nothing = filter_dismissed(parsed, ["priority:!!", "date:tomorrow"])
    assert not nothing.has_any_pattern


def test_pattern_key():
    [p] = parse_task_input("ship it #P2", now=NOW).priorities
    assert p.key == "priority:#P2"


def test_session_dismissal_survives_reparse_until_cleared():
    s = ComposeSession(LABELS)
    s.set_text("Buy milk !!")
    [p] = s.suggestions(now=NOW).priorities
    s.dismiss(p)

    s.set_text("Buy milk !! and eggs")
    assert s.suggestions(now=NOW).priorities == []

    s.set_text("")
    s.set_text("Buy milk !!")
    assert len(s.suggestions(now=NOW).priorities) == 1


def test_session_dismiss_all():
    s = ComposeSession(LABELS)
    s.set_text("Buy milk tomorrow #errands !!")
    s.dismiss_all(s.suggestions(now=NOW).labels + s.suggestions(now=NOW).priorities)
    remaining = s.suggestions(now=NOW)
    assert remaining.labels == [] and remaining.priorities == []
    assert len(remaining.dates) == 1


def test_session_accept_and_submit():
    s = ComposeSession(LABELS)
    s.set_text("Buy milk tomorrow #errands #garden !!")
    parsed = s.suggestions(now=NOW)

    s.accept(parsed.priorities[0])
    s.accept(parsed.dates[0])
    for lbl in parsed.labels:
        s.accept(lbl)

    assert s.text == "Buy milk tomorrow #errands #garden"
    after = s.suggestions(now=NOW)
    assert after.dates == []
    assert after.labels == []
    assert after.priorities == []

    draft = s.submit()
    assert draft.title == "Buy milk tomorrow #errands #garden"
    assert draft.due_date == date(2025, 6, 11)
    assert draft.label_ids == ["9"]
    assert draft.new_labels == ["garden"]
    assert draft.priority == 2

    assert s.text == ""
    assert s.dismissed == set()
    assert s.label_ids == [] and s.due_date is None and s.priority == 0


def test_accepted_date_is_not_suggested_again():
    s = ComposeSession([])
    s.set_text("Buy milk tomor")
    [d] = s.suggestions(now=NOW).dates
    s.accept(d)

    assert s.text == "Buy milk tomorrow"
    assert s.due_date == date(2025, 6, 11)
    again = s.suggestions(now=NOW)
    assert again.dates == []
    assert not again.has_any_pattern

    s.set_text("Buy milk tomorrow friday")
    assert [p.matched_text for p in s.suggestions(now=NOW).dates] == ["friday"]
