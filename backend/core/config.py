import os
from pathlib import Path
from dotenv import load_dotenv

_BACKEND_ROOT = Path(__file__).resolve().parents[1]
_BACKEND_ENV_PATH = _BACKEND_ROOT / ".env"
load_dotenv(dotenv_path=_BACKEND_ENV_PATH, override=False)


def _env_bool(name: str, default: str) -> bool:
    return str(os.getenv(name, default)).strip().lower() in {"1", "true", "yes", "on"}


OPENAI_API_KEY = str(os.getenv("OPENAI_API_KEY") or "").strip()

# Answer generation
ANSWER_MODEL = str(os.getenv("ANSWER_MODEL") or "gpt-3.5-turbo").strip()
ANSWER_TEMPERATURE = float(os.getenv("ANSWER_TEMPERATURE", "0.8"))
ANSWER_MAX_TOKENS = max(16, int(os.getenv("ANSWER_MAX_TOKENS", "500")))
ANSWER_PRESENCE_PENALTY = float(os.getenv("ANSWER_PRESENCE_PENALTY", "0.6"))
ANSWER_FREQUENCY_PENALTY = float(os.getenv("ANSWER_FREQUENCY_PENALTY", "0.4"))
GENERATION_TIMEOUT_SEC = max(1.0, float(os.getenv("GENERATION_TIMEOUT_SEC", "30")))

# Conversation memory
SESSION_TTL_SEC = max(0.0, float(os.getenv("SESSION_TTL_SEC", "3600")))  # 0 disables expiry
SESSION_CLEANUP_INTERVAL_SEC = max(30.0, float(os.getenv("SESSION_CLEANUP_INTERVAL_SEC", "120")))
MAX_PROMPT_TURNS = max(0, int(os.getenv("MAX_PROMPT_TURNS", "20")))  # 0 = whole history
RESUME_MIN_CHARS = max(1, int(os.getenv("RESUME_MIN_CHARS", "100")))
RESUME_MAX_CHARS = max(RESUME_MIN_CHARS, int(os.getenv("RESUME_MAX_CHARS", "4000")))

# Speech
SPEECH_CONTINUOUS = _env_bool("SPEECH_CONTINUOUS", "true")
WS_MAX_TEXT_BYTES = max(1024, int(os.getenv("WS_MAX_TEXT_BYTES", "65536")))
