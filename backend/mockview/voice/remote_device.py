"""Speech device whose recognition engine runs in the connected browser."""

from __future__ import annotations

from typing import Awaitable, Callable, Optional

from mockview.transcript.models import DeviceResult, DeviceResultEvent
from mockview.voice.device import DeviceListener

SendFn = Callable[[dict], Awaitable[None]]

DEVICE_MESSAGE_TYPES = {"device_start", "result", "device_error", "device_end"}


def _alternative_text(alternative) -> str:
    if isinstance(alternative, dict):
        return str(alternative.get("transcript") or "")
    if isinstance(alternative, str):
        return alternative
    raise ValueError("alternative must be a string or an object with a transcript")


def parse_result_event(payload: dict) -> DeviceResultEvent:
    raw_results = payload.get("results")
    if not isinstance(raw_results, list):
        raise ValueError("results must be a list")

    results: list[DeviceResult] = []
    for item in raw_results:
        if not isinstance(item, dict):
            raise ValueError("each result must be an object")
        alternatives = item.get("alternatives") or []
        if not isinstance(alternatives, list):
            raise ValueError("alternatives must be a list")
        results.append(
            DeviceResult(
                alternatives=[_alternative_text(alt) for alt in alternatives],
                is_final=bool(item.get("is_final", item.get("isFinal", False))),
            )
        )

    try:
        result_index = int(payload.get("result_index", 0) or 0)
    except (TypeError, ValueError) as exc:
        raise ValueError("result_index must be an integer") from exc
    return DeviceResultEvent(results=results, result_index=result_index)


class RemoteSpeechDevice:
    """
    start()/stop() become control frames sent to the client;
    frames coming back from the client are dispatched to the listener.
    """

    def __init__(self, send_fn: SendFn, supported: bool = True):
        self._send_fn = send_fn
        self._supported = supported
        self._listener: Optional[DeviceListener] = None
        self.running = False

    def is_supported(self) -> bool:
        return self._supported

    async def start(self, listener: DeviceListener) -> None:
        self._listener = listener
        await self._send_fn({"type": "control", "action": "start"})
        self.running = True

    async def stop(self) -> None:
        self.running = False
        await self._send_fn({"type": "control", "action": "stop"})

    async def dispatch(self, payload: dict) -> None:
        listener = self._listener
        if listener is None:
            return

        payload_type = str(payload.get("type") or "").strip().lower()
        if payload_type == "device_start":
            listener.on_start()
        elif payload_type == "result":
            listener.on_result(parse_result_event(payload))
        elif payload_type == "device_error":
            self.running = False
            listener.on_error(str(payload.get("error") or "unknown"))
        elif payload_type == "device_end":
            self.running = False
            await listener.on_end()
        else:
            raise ValueError(f"unknown device message type: {payload_type or 'missing'}")
