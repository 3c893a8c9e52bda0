from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import asyncio
import logging
import os

from core.config import (
    GENERATION_TIMEOUT_SEC,
    MAX_PROMPT_TURNS,
    SESSION_CLEANUP_INTERVAL_SEC,
    SESSION_TTL_SEC,
)
from mockview.api.ws_transcript import router as transcript_ws_router
from mockview.errors import (
    GENERATION_FAILED,
    GENERATION_TIMEOUT,
    SESSION_BUSY,
    SESSION_NOT_FOUND,
    MockviewError,
)
from mockview.schemas import (
    AnswerRequest,
    AnswerResponse,
    ClearRequest,
    ResumeUploadRequest,
    ResumeUploadResponse,
    SessionStatusResponse,
)
from mockview.services.interview_service import InterviewService
from mockview.services.openai_service import OpenAIAnswerGenerator
from mockview.session.registry import SessionRegistry

app = FastAPI(title="Mockview – Interview Answers")
logger = logging.getLogger("mockview.main")

_ERROR_STATUS = {
    SESSION_NOT_FOUND: 404,
    SESSION_BUSY: 409,
    GENERATION_FAILED: 502,
    GENERATION_TIMEOUT: 504,
}


def _get_allowed_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if not raw:
        return [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    return [item.strip() for item in raw.split(",") if item.strip()]


_allowed_origins = _get_allowed_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

app.state.interview_service = InterviewService(
    registry=SessionRegistry(ttl_sec=SESSION_TTL_SEC, max_prompt_turns=MAX_PROMPT_TURNS),
    generator=OpenAIAnswerGenerator(),
    timeout_sec=GENERATION_TIMEOUT_SEC,
)
app.include_router(transcript_ws_router)

_session_cleanup_task: asyncio.Task | None = None


def _service(request: Request) -> InterviewService:
    return request.app.state.interview_service


@app.exception_handler(MockviewError)
async def mockview_error_handler(request: Request, exc: MockviewError):
    return JSONResponse(
        status_code=_ERROR_STATUS.get(exc.code, 500),
        content={"detail": exc.message, "code": exc.code},
    )


@app.on_event("startup")
async def startup_banner():
    global _session_cleanup_task
    logger.info("[SYSTEM] CORS allow_origins=%s", _allowed_origins)
    logger.info(
        "[SYSTEM] sessions ttl_sec=%s cleanup_interval_sec=%s max_prompt_turns=%s",
        SESSION_TTL_SEC,
        SESSION_CLEANUP_INTERVAL_SEC,
        MAX_PROMPT_TURNS,
    )

    async def _session_cleanup_loop():
        while True:
            await asyncio.sleep(SESSION_CLEANUP_INTERVAL_SEC)
            removed = app.state.interview_service.registry.cleanup_expired()
            if removed > 0:
                logger.info("[SYSTEM] cleaned expired sessions=%s", removed)

    _session_cleanup_task = asyncio.create_task(_session_cleanup_loop())


@app.on_event("shutdown")
async def shutdown_handler():
    global _session_cleanup_task
    if _session_cleanup_task is not None:
        _session_cleanup_task.cancel()
        try:
            await _session_cleanup_task
        except asyncio.CancelledError:
            pass
        finally:
            _session_cleanup_task = None
    logger.info("[SYSTEM] shutdown complete")


@app.get("/healthz")
async def healthz(request: Request):
    return {"status": "ok", "service": "mockview", "sessions": len(_service(request).registry)}


@app.post("/api/interview/resume", response_model=ResumeUploadResponse)
def upload_resume(req: ResumeUploadRequest, request: Request):
    try:
        session_id = _service(request).upload_resume(req.content)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return ResumeUploadResponse(session_id=session_id)


@app.post("/api/interview/answer", response_model=AnswerResponse)
async def get_answer(req: AnswerRequest, request: Request):
    try:
        answer = await _service(request).get_answer(req.question, req.session_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return AnswerResponse(response=answer)


@app.post("/api/interview/clear")
def clear_conversation(req: ClearRequest, request: Request):
    _service(request).clear_conversation(req.session_id)
    return {"status": "cleared"}


@app.delete("/api/interview/{session_id}")
def delete_conversation(session_id: str, request: Request):
    _service(request).clear_conversation(session_id)
    return {"status": "cleared"}


@app.get("/api/interview/{session_id}", response_model=SessionStatusResponse)
def get_session_status(session_id: str, request: Request):
    session = _service(request).registry.get(session_id)
    return SessionStatusResponse(**session.snapshot())
