"""Error codes, user-facing messages and the exception taxonomy."""

from __future__ import annotations

SPEECH_UNSUPPORTED = "SPEECH_UNSUPPORTED"
RESTART_FAILED = "RESTART_FAILED"
DEVICE_ERROR = "DEVICE_ERROR"
SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
SESSION_BUSY = "SESSION_BUSY"
GENERATION_FAILED = "GENERATION_FAILED"
GENERATION_TIMEOUT = "GENERATION_TIMEOUT"
BAD_MESSAGE = "BAD_MESSAGE"

ERROR_MESSAGES = {
    SPEECH_UNSUPPORTED: "Speech recognition is not supported on this device.",
    RESTART_FAILED: "Listening stopped unexpectedly, please start again.",
    DEVICE_ERROR: "Speech recognition failed.",
    SESSION_NOT_FOUND: "Session not found or expired",
    SESSION_BUSY: "An answer is already being generated for this session.",
    GENERATION_FAILED: "Answer generation failed, please retry.",
    GENERATION_TIMEOUT: "Answer generation timed out, please retry.",
    BAD_MESSAGE: "Message could not be processed.",
}


class MockviewError(Exception):
    code = "ERROR"

    def __init__(self, message: str | None = None):
        self.message = message or ERROR_MESSAGES.get(self.code, self.code)
        super().__init__(self.message)


class UnsupportedError(MockviewError):
    code = SPEECH_UNSUPPORTED


class RestartFailedError(MockviewError):
    code = RESTART_FAILED


class RecognitionDeviceError(MockviewError):
    code = DEVICE_ERROR

    def __init__(self, device_code: str, message: str | None = None):
        self.device_code = str(device_code or "unknown")
        super().__init__(message or f"{ERROR_MESSAGES[DEVICE_ERROR]} ({self.device_code})")


class SessionNotFoundError(MockviewError):
    code = SESSION_NOT_FOUND

    def __init__(self, session_id: str = "", message: str | None = None):
        self.session_id = session_id
        super().__init__(message)


class SessionBusyError(MockviewError):
    code = SESSION_BUSY

    def __init__(self, session_id: str = "", message: str | None = None):
        self.session_id = session_id
        super().__init__(message)


class GenerationError(MockviewError):
    code = GENERATION_FAILED


class GenerationTimeoutError(GenerationError):
    code = GENERATION_TIMEOUT
