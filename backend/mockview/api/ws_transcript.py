import asyncio
import json
import logging
import uuid
from typing import Awaitable, Callable

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from core.config import SPEECH_CONTINUOUS, WS_MAX_TEXT_BYTES
from core.logger import log_event
from core.state import ListeningState
from mockview.errors import BAD_MESSAGE, ERROR_MESSAGES, MockviewError
from mockview.voice.controller import RecognitionController
from mockview.voice.remote_device import DEVICE_MESSAGE_TYPES, RemoteSpeechDevice

logger = logging.getLogger("ws_transcript")

router = APIRouter()


def _error_frame(code: str, message: str | None = None) -> dict:
    return {
        "type": "error",
        "code": code,
        "message": message or ERROR_MESSAGES.get(code, code),
    }


class FrameOutbox:
    """
    Ordered outbound frame queue drained by one sender task.
    Once a send fails the outbox is closed and further frames are dropped.
    """

    def __init__(self, session_id: str = ""):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._session_id = session_id
        self.closed = False

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def put(self, payload: dict) -> bool:
        if self.closed:
            return False
        self._queue.put_nowait(payload)
        return True

    def close(self) -> None:
        if not self.closed:
            self._queue.put_nowait(None)

    async def run(self, send_fn: Callable[[dict], Awaitable[None]], is_connected: Callable[[], bool]) -> None:
        try:
            while True:
                payload = await self._queue.get()
                if payload is None:
                    break
                if not is_connected():
                    continue
                try:
                    await send_fn(payload)
                except Exception as exc:
                    logger.warning("ws send failed | session_id=%s err=%s", self._session_id, exc)
                    break
        finally:
            self.closed = True
            while not self._queue.empty():
                self._queue.get_nowait()


@router.websocket("/ws/transcript")
async def transcript_ws(websocket: WebSocket):
    session_id = str(websocket.query_params.get("session_id") or uuid.uuid4())
    supported = str(websocket.query_params.get("supported") or "true").strip().lower() not in {"0", "false", "no", "off"}

    await websocket.accept()
    log_event("ws_transcript", "connect", session_id, supported=supported)

    outbox = FrameOutbox(session_id)

    async def _enqueue(payload: dict) -> None:
        outbox.put(payload)

    def _on_transcript_change(text: str, is_final: bool) -> None:
        outbox.put({
            "type": "transcript",
            "text": text,
            "is_final": is_final,
            "final_text": controller.aggregator.last_final_text,
        })

    def _on_state_change(_from_state: ListeningState, to_state: ListeningState) -> None:
        outbox.put({"type": "state", "state": to_state.value})

    def _on_error(error: MockviewError) -> None:
        outbox.put(_error_frame(error.code, error.message))

    device = RemoteSpeechDevice(send_fn=_enqueue, supported=supported)
    controller = RecognitionController(
        device=device,
        continuous=SPEECH_CONTINUOUS,
        on_transcript_change=_on_transcript_change,
        on_state_change=_on_state_change,
        on_error=_on_error,
        session_id=session_id,
    )
    sender_task = asyncio.create_task(
        outbox.run(websocket.send_json, lambda: websocket.client_state == WebSocketState.CONNECTED)
    )

    try:
        while True:
            text_payload = await websocket.receive_text()
            if outbox.closed:
                log_event("ws_transcript", "disconnect", session_id, reason="send_failed")
                break
            if len(text_payload.encode("utf-8")) > WS_MAX_TEXT_BYTES:
                logger.warning("WS message too large | session_id=%s bytes=%s", session_id, len(text_payload.encode("utf-8")))
                outbox.put(_error_frame(BAD_MESSAGE, "Message too large"))
                continue

            try:
                payload = json.loads(text_payload)
            except ValueError:
                outbox.put(_error_frame(BAD_MESSAGE, "Message is not valid JSON"))
                continue
            if not isinstance(payload, dict):
                outbox.put(_error_frame(BAD_MESSAGE, "Message must be a JSON object"))
                continue

            payload_type = str(payload.get("type") or "").strip().lower()

            if payload_type == "ping":
                outbox.put({"type": "pong", "session_id": session_id})
            elif payload_type == "start":
                try:
                    await controller.start()
                except MockviewError as exc:
                    outbox.put(_error_frame(exc.code, exc.message))
            elif payload_type == "stop":
                await controller.stop()
            elif payload_type == "clear":
                controller.clear()
            elif payload_type in DEVICE_MESSAGE_TYPES:
                try:
                    await device.dispatch(payload)
                except ValueError as exc:
                    outbox.put(_error_frame(BAD_MESSAGE, str(exc)))
            else:
                outbox.put(_error_frame(BAD_MESSAGE, f"Unknown message type: {payload_type or 'missing'}"))
    except WebSocketDisconnect:
        log_event("ws_transcript", "disconnect", session_id, reason="client_disconnect")
    finally:
        await controller.stop()
        outbox.close()
        try:
            await asyncio.wait_for(sender_task, timeout=2.0)
        except asyncio.TimeoutError:
            sender_task.cancel()
