import logging
from typing import List, Optional

from .models import RecognitionEvent, TranscriptUpdate
from .state import TranscriptState

logging.basicConfig(
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger("transcript_engine")


class TranscriptAggregator:
    """
    Deterministic transcript aggregator.
    Merges interim/final recognition events into one growing transcript.
    apply() never suspends; it runs inside the device's result callback.
    """

    def __init__(self):
        self.state = TranscriptState()
        self._last_final_text: Optional[str] = None

    def apply(self, event: RecognitionEvent) -> TranscriptUpdate:
        final_seen = False

        for segment in event.new_segments():
            if segment.is_final:
                if self.state.commit_final(segment.text):
                    self._last_final_text = self.state.committed_segments[-1]
                final_seen = True
            else:
                # later interims in the same batch overwrite earlier ones
                self.state.set_interim(segment.text)

        if final_seen:
            logger.info("FINAL committed | segments=%s", len(self.state.committed_segments))
        return TranscriptUpdate(text=self.state.full_text(), is_final=final_seen)

    def clear(self) -> None:
        self.state.reset()
        self._last_final_text = None

    @property
    def full_text(self) -> str:
        return self.state.full_text()

    @property
    def committed_segments(self) -> List[str]:
        return list(self.state.committed_segments)

    @property
    def pending_interim(self) -> Optional[str]:
        return self.state.pending_interim

    @property
    def last_final_text(self) -> str:
        """
        Most recently committed segment, i.e. the finished question text.
        """
        return self._last_final_text or ""

    def snapshot(self) -> dict:
        return {
            "segment_count": len(self.state.committed_segments),
            "has_interim": self.state.pending_interim is not None,
            "chars": len(self.state.full_text()),
        }
