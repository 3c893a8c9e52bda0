import pytest
from fastapi.testclient import TestClient

from conftest import FakeAnswerGenerator
from mockview.errors import GenerationError
from mockview.services.interview_service import InterviewService
from mockview.session.registry import SessionRegistry


@pytest.fixture
def api(fake_generator):
    from mockview.main import app

    original = app.state.interview_service
    app.state.interview_service = InterviewService(registry=SessionRegistry(), generator=fake_generator)
    with TestClient(app) as client:
        yield client
    app.state.interview_service = original


def _upload(api, resume_text) -> str:
    response = api.post("/api/interview/resume", json={"content": resume_text})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    return body["session_id"]


def test_healthz(api):
    response = api.get("/healthz")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_upload_then_answer_flow(api, resume_text, fake_generator):
    session_id = _upload(api, resume_text)

    response = api.post("/api/interview/answer", json={"question": "Why Python?", "session_id": session_id})

    assert response.status_code == 200
    assert response.json() == {"response": "answer 1", "status": "success"}
    status = api.get(f"/api/interview/{session_id}").json()
    assert status["turns"] == 1
    assert status["busy"] is False


def test_resume_length_is_validated(api):
    too_short = api.post("/api/interview/resume", json={"content": "x" * 20})
    too_long = api.post("/api/interview/resume", json={"content": "x" * 4001})

    assert too_short.status_code == 422
    assert too_long.status_code == 422


def test_answer_unknown_session_is_404(api):
    response = api.post("/api/interview/answer", json={"question": "Hi?", "session_id": "session_nope"})

    assert response.status_code == 404
    assert response.json()["code"] == "SESSION_NOT_FOUND"


def test_clear_is_idempotent_and_removes_session(api, resume_text):
    session_id = _upload(api, resume_text)

    assert api.post("/api/interview/clear", json={"session_id": session_id}).json() == {"status": "cleared"}
    assert api.delete(f"/api/interview/{session_id}").status_code == 200

    response = api.post("/api/interview/answer", json={"question": "Still there?", "session_id": session_id})
    assert response.status_code == 404


def test_generation_failure_maps_to_502(api, resume_text):
    from mockview.main import app

    app.state.interview_service.generator = FakeAnswerGenerator(error=GenerationError("provider down"))
    session_id = _upload(api, resume_text)

    response = api.post("/api/interview/answer", json={"question": "Q?", "session_id": session_id})

    assert response.status_code == 502
    assert response.json() == {"detail": "provider down", "code": "GENERATION_FAILED"}
    assert api.get(f"/api/interview/{session_id}").json()["turns"] == 0


def test_generation_timeout_maps_to_504(api, resume_text):
    from mockview.main import app

    service = app.state.interview_service
    service.generator = FakeAnswerGenerator(delay_sec=1.0)
    service.timeout_sec = 0.05
    session_id = _upload(api, resume_text)

    response = api.post("/api/interview/answer", json={"question": "Q?", "session_id": session_id})

    assert response.status_code == 504
    assert response.json()["code"] == "GENERATION_TIMEOUT"


def test_ws_transcript_full_cycle(api):
    with api.websocket_connect("/ws/transcript?session_id=ws-test") as ws:
        ws.send_json({"type": "start"})
        assert ws.receive_json() == {"type": "state", "state": "active"}
        assert ws.receive_json() == {"type": "control", "action": "start"}

        ws.send_json({"type": "result", "result_index": 0, "results": [{"alternatives": ["tell me"], "is_final": False}]})
        assert ws.receive_json() == {"type": "transcript", "text": "tell me", "is_final": False, "final_text": ""}

        ws.send_json({
            "type": "result",
            "result_index": 0,
            "results": [{"alternatives": [{"transcript": "tell me about yourself"}], "is_final": True}],
        })
        assert ws.receive_json() == {
            "type": "transcript",
            "text": "tell me about yourself",
            "is_final": True,
            "final_text": "tell me about yourself",
        }

        ws.send_json({"type": "device_end"})
        assert ws.receive_json() == {"type": "state", "state": "restarting"}
        assert ws.receive_json() == {"type": "control", "action": "start"}
        assert ws.receive_json() == {"type": "state", "state": "active"}

        ws.send_json({"type": "stop"})
        assert ws.receive_json() == {"type": "state", "state": "idle"}
        assert ws.receive_json() == {"type": "control", "action": "stop"}


def test_ws_device_error_stops_listening(api):
    with api.websocket_connect("/ws/transcript") as ws:
        ws.send_json({"type": "start"})
        ws.receive_json()
        ws.receive_json()

        ws.send_json({"type": "device_error", "error": "not-allowed"})
        assert ws.receive_json() == {"type": "state", "state": "idle"}
        error = ws.receive_json()
        assert error["type"] == "error"
        assert error["code"] == "DEVICE_ERROR"


def test_ws_unsupported_device(api):
    with api.websocket_connect("/ws/transcript?supported=false") as ws:
        ws.send_json({"type": "start"})
        error = ws.receive_json()
        assert error["type"] == "error"
        assert error["code"] == "SPEECH_UNSUPPORTED"


def test_ws_rejects_bad_frames_and_answers_ping(api):
    with api.websocket_connect("/ws/transcript?session_id=ws-ping") as ws:
        ws.send_text("{not json")
        assert ws.receive_json()["code"] == "BAD_MESSAGE"

        ws.send_json({"type": "mystery"})
        assert ws.receive_json()["code"] == "BAD_MESSAGE"

        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong", "session_id": "ws-ping"}


def test_ws_clear_resets_transcript(api):
    with api.websocket_connect("/ws/transcript") as ws:
        ws.send_json({"type": "clear"})
        assert ws.receive_json() == {"type": "transcript", "text": "", "is_final": True, "final_text": ""}
