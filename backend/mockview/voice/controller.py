"""State-machine based ownership of the continuous listening device."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from core.logger import log_event
from core.state import ListeningState
from mockview.errors import MockviewError, RecognitionDeviceError, RestartFailedError, UnsupportedError
from mockview.transcript.engine import TranscriptAggregator
from mockview.transcript.models import DeviceResultEvent, RecognitionEvent
from mockview.voice.device import SpeechDevice

logging.basicConfig(
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger("recognition_controller")

TranscriptCallback = Callable[[str, bool], None]
StateCallback = Callable[[ListeningState, ListeningState], None]
ErrorCallback = Callable[[MockviewError], None]


class RecognitionController:
    """
    IDLE -> ACTIVE on start().
    ACTIVE -> RESTARTING -> ACTIVE when the device ends on its own in continuous mode.
    Any state -> IDLE on stop(), device error or failed restart.
    """

    def __init__(
        self,
        device: SpeechDevice,
        aggregator: Optional[TranscriptAggregator] = None,
        continuous: bool = True,
        on_transcript_change: Optional[TranscriptCallback] = None,
        on_state_change: Optional[StateCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        session_id: str = "",
    ) -> None:
        self._device = device
        self._aggregator = aggregator or TranscriptAggregator()
        self._continuous = continuous
        self._on_transcript_change = on_transcript_change
        self._on_state_change = on_state_change
        self._on_error = on_error
        self._session_id = session_id

        self._state = ListeningState.IDLE
        # bumped whenever a listening span ends so in-flight restarts can tell they are stale
        self._span = 0
        self._last_notified_text = ""
        self.last_error: Optional[MockviewError] = None

    @property
    def state(self) -> ListeningState:
        return self._state

    @property
    def aggregator(self) -> TranscriptAggregator:
        return self._aggregator

    @property
    def transcript(self) -> str:
        return self._aggregator.full_text

    @property
    def is_supported(self) -> bool:
        return bool(self._device.is_supported())

    # -------------------------
    # CALLER API
    # -------------------------

    async def start(self) -> None:
        if not self.is_supported:
            raise UnsupportedError()
        if self._state != ListeningState.IDLE:
            return

        self._span += 1
        span = self._span
        self._aggregator.clear()
        self._last_notified_text = ""
        self.last_error = None
        self._transition(ListeningState.ACTIVE)

        try:
            await self._device.start(self)
        except Exception as exc:
            logger.warning("device start failed | err=%s", exc)
            if span == self._span:
                self._span += 1
                self._transition(ListeningState.IDLE)
            raise RecognitionDeviceError("start-failed", f"Error starting speech recognition: {exc}") from exc

        if span != self._span:
            await self._release_stale_handshake()

    async def stop(self) -> None:
        if self._state == ListeningState.IDLE:
            return
        self._span += 1
        self._transition(ListeningState.IDLE)
        await self._safe_stop_device()

    def clear(self) -> None:
        self._aggregator.clear()
        self._last_notified_text = ""
        self._notify_transcript("", True)

    # -------------------------
    # DEVICE CALLBACKS
    # -------------------------

    def on_start(self) -> None:
        log_event("recognition", "device_started", self._session_id, state=self._state.value)

    def on_result(self, event: DeviceResultEvent) -> None:
        if self._state == ListeningState.IDLE:
            logger.debug("result ignored while idle")
            return

        text, is_final = self._aggregator.apply(RecognitionEvent.from_device(event))
        if is_final or text != self._last_notified_text:
            self._last_notified_text = text
            self._notify_transcript(text, is_final)

    def on_error(self, code: str) -> None:
        if self._state == ListeningState.IDLE:
            return
        logger.error("Speech recognition error: %s", code)
        self._span += 1
        self._transition(ListeningState.IDLE)
        self._emit_error(RecognitionDeviceError(code))

    async def on_end(self) -> None:
        if self._state != ListeningState.ACTIVE:
            return
        if not self._continuous:
            self._span += 1
            self._transition(ListeningState.IDLE)
            return

        span = self._span
        self._transition(ListeningState.RESTARTING)
        try:
            await self._device.start(self)
        except Exception as exc:
            if span != self._span:
                logger.info("restart failed after stop | err=%s", exc)
                return
            logger.error("Error restarting recognition: %s", exc)
            self._span += 1
            self._transition(ListeningState.IDLE)
            self._emit_error(RestartFailedError(f"Error restarting recognition: {exc}"))
            return

        if span != self._span:
            await self._release_stale_handshake()
            return
        self._transition(ListeningState.ACTIVE)

    # -------------------------
    # INTERNALS
    # -------------------------

    def _notify_transcript(self, text: str, is_final: bool) -> None:
        log_event("recognition", "transcript_change", self._session_id, text=text, is_final=is_final)
        if self._on_transcript_change:
            self._on_transcript_change(text, is_final)

    def _emit_error(self, error: MockviewError) -> None:
        self.last_error = error
        log_event("recognition", "error", self._session_id, code=error.code, message=error.message)
        if self._on_error:
            self._on_error(error)

    async def _release_stale_handshake(self) -> None:
        # a newer span that is ACTIVE or RESTARTING owns the device
        if self._state == ListeningState.IDLE:
            await self._safe_stop_device()

    async def _safe_stop_device(self) -> None:
        try:
            await self._device.stop()
        except Exception as exc:
            logger.warning("Error stopping speech recognition: %s", exc)

    def _transition(self, to_state: ListeningState) -> None:
        from_state = self._state
        if from_state == to_state:
            return
        self._state = to_state
        log_event("recognition", "state_change", self._session_id, from_state=from_state.value, to_state=to_state.value)
        if self._on_state_change:
            self._on_state_change(from_state, to_state)
