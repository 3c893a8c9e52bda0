import json
import logging

from core.logger import log_event


def test_log_event_redacts_text_fields(caplog):
    with caplog.at_level(logging.INFO, logger="mockview.events"):
        log_event("interview", "answer_generated", "s-1", question="Why us?", answer="Because", turns=2)

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["component"] == "interview"
    assert payload["session_id"] == "s-1"
    assert payload["question"] == {"redacted": True, "length": 7}
    assert payload["answer"] == {"redacted": True, "length": 7}
    assert payload["turns"] == 2


def test_log_event_flattens_enums_and_redacts_nested_content(caplog):
    from core.state import ListeningState

    with caplog.at_level(logging.INFO, logger="mockview.events"):
        log_event("recognition", "state_change", "s-2", to_state=ListeningState.ACTIVE, extra={"transcript": "abc", "n": 1})

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["to_state"] == "active"
    assert payload["extra"] == {"transcript": {"redacted": True, "length": 3}, "n": 1}
