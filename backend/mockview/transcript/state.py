from typing import List, Optional

from . import rules


class TranscriptState:
    """
    Holds all transcript-related state for ONE listening span.
    committed_segments is append-only.
    """

    def __init__(self):
        # FINAL truth
        self.committed_segments: List[str] = []

        # Latest not-yet-final utterance, display only
        self.pending_interim: Optional[str] = None

    # -------------------------
    # FINAL HANDLING
    # -------------------------

    def commit_final(self, text: str) -> bool:
        """
        Commit a final segment and drop the interim it supersedes.
        Returns True when something was appended.
        """
        self.pending_interim = None
        cleaned = str(text or "").strip()
        if not cleaned and rules.SKIP_BLANK_FINALS:
            return False
        self.committed_segments.append(cleaned)
        return True

    # -------------------------
    # INTERIM HANDLING
    # -------------------------

    def set_interim(self, text: str) -> None:
        cleaned = str(text or "").strip()
        self.pending_interim = cleaned or None

    # -------------------------
    # VIEW
    # -------------------------

    def full_text(self) -> str:
        parts = list(self.committed_segments)
        if self.pending_interim:
            parts.append(self.pending_interim)
        return rules.SEGMENT_SEPARATOR.join(parts)

    def reset(self) -> None:
        self.committed_segments = []
        self.pending_interim = None
