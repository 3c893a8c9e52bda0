from pydantic import BaseModel, Field, field_validator

from core.config import RESUME_MAX_CHARS, RESUME_MIN_CHARS


class ResumeUploadRequest(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def _check_length(cls, value: str) -> str:
        text = value.strip()
        if len(text) > RESUME_MAX_CHARS:
            raise ValueError(f"Resume is too long. Maximum {RESUME_MAX_CHARS} characters allowed.")
        if len(text) < RESUME_MIN_CHARS:
            raise ValueError(f"Resume is too short. Minimum {RESUME_MIN_CHARS} characters required.")
        return text


class ResumeUploadResponse(BaseModel):
    session_id: str
    status: str = "success"


class AnswerRequest(BaseModel):
    question: str = Field(min_length=1)
    session_id: str = Field(min_length=1)


class AnswerResponse(BaseModel):
    response: str
    status: str = "success"


class ClearRequest(BaseModel):
    session_id: str


class SessionStatusResponse(BaseModel):
    session_id: str
    turns: int
    created_at: float
    last_active_at: float
    busy: bool
