# backend/core/state.py

from enum import Enum

class ListeningState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    RESTARTING = "restarting"
