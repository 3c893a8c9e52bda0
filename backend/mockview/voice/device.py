"""Protocol interfaces between RecognitionController and a speech device."""

from __future__ import annotations

from typing import Protocol

from mockview.transcript.models import DeviceResultEvent


class DeviceListener(Protocol):
    def on_start(self) -> None: ...

    def on_result(self, event: DeviceResultEvent) -> None: ...

    def on_error(self, code: str) -> None: ...

    async def on_end(self) -> None: ...


class SpeechDevice(Protocol):
    def is_supported(self) -> bool: ...

    async def start(self, listener: DeviceListener) -> None: ...

    async def stop(self) -> None: ...
