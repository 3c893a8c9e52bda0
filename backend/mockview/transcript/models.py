from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class RecognitionSegment:
    """
    One recognition result, top alternative only.
    """
    text: str = ""
    is_final: bool = False


@dataclass(frozen=True)
class DeviceResult:
    """
    Raw per-index result as delivered by a speech device.
    """
    alternatives: List[str] = field(default_factory=list)
    is_final: bool = False


@dataclass(frozen=True)
class DeviceResultEvent:
    """
    Raw result callback payload.
    The device re-delivers its growing results buffer;
    entries from result_index onward are new.
    """
    results: List[DeviceResult] = field(default_factory=list)
    result_index: int = 0


@dataclass(frozen=True)
class RecognitionEvent:
    """
    Batch of segments handed to the aggregator.
    Only segments[start_index:] are new for this callback.
    """
    segments: List[RecognitionSegment] = field(default_factory=list)
    start_index: int = 0

    @classmethod
    def from_device(cls, raw: DeviceResultEvent) -> "RecognitionEvent":
        segments = [
            RecognitionSegment(
                text=str(result.alternatives[0] if result.alternatives else ""),
                is_final=bool(result.is_final),
            )
            for result in raw.results
        ]
        return cls(segments=segments, start_index=int(raw.result_index or 0))

    def new_segments(self) -> List[RecognitionSegment]:
        return list(self.segments[max(0, self.start_index):])


@dataclass(frozen=True)
class TranscriptUpdate:
    """
    Result of applying one event.
    Unpacks as (text, is_final).
    """
    text: str = ""
    is_final: bool = False

    def __iter__(self):
        yield self.text
        yield self.is_final
