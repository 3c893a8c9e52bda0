"""
Structured event logging for mockview.

One JSON line per event on the "mockview.events" logger.
Candidate speech, questions, answers and resume text never reach the log;
they are replaced by their length.
"""

import json
import logging
from enum import Enum
from typing import Any

events_logger = logging.getLogger("mockview.events")

# fields carrying interview content
CONTENT_FIELDS = frozenset({
	"text",
	"transcript",
	"full_text",
	"interim",
	"prompt",
	"question",
	"answer",
	"response",
	"resume",
	"resume_context",
	"content",
})


def _redact(field: str, value: Any) -> Any:
	field = str(field or "").lower()
	if field in CONTENT_FIELDS:
		return {"redacted": True, "length": len(str(value or ""))}
	if isinstance(value, Enum):
		return _redact(field, value.value)
	if value is None or isinstance(value, (str, int, float, bool)):
		return value
	if isinstance(value, dict):
		return {str(k): _redact(str(k), v) for k, v in value.items()}
	if isinstance(value, (list, tuple, set)):
		return [_redact(field, item) for item in value]
	return str(value)


def log_event(component: str, event: str, session_id: str, **fields) -> None:
	"""
	Emit `event` for `session_id`, e.g.
	log_event("recognition", "state_change", sid, from_state="active", to_state="idle")
	"""
	record = {
		"component": str(component or "mockview"),
		"event": str(event or "unknown"),
		"session_id": str(session_id or ""),
	}
	for name, value in fields.items():
		record[str(name)] = _redact(name, value)
	events_logger.info(json.dumps(record, ensure_ascii=False, default=str))
