"""Join synthesized runs into one segment with boundary-aware pauses."""

from pydub import AudioSegment

from promptspeak.constants import (
    PAUSE_SAME_RUN_MS,
    PAUSE_VOICE_CHANGE_MS,
    PAUSE_SENTENCE_MS,
    PAUSE_PARAGRAPH_MS,
    PAUSE_SEGMENT_MS,
)
from promptspeak.models import Run, ScopeKind


def _calculate_pause(prev: Run, curr: Run) -> int:
    """Calculate pause duration between two runs.

    Uses max() when multiple rules apply (e.g., paragraph break + voice change).
    """
    pause = PAUSE_SAME_RUN_MS  # base pause

    if curr.boundary is ScopeKind.SENTENCE:
        pause = max(pause, PAUSE_SENTENCE_MS)

    if curr.boundary is ScopeKind.PARAGRAPH:
        pause = max(pause, PAUSE_PARAGRAPH_MS)

    if prev.voice != curr.voice:
        pause = max(pause, PAUSE_VOICE_CHANGE_MS)

    return pause


def concatenate_runs(runs: list[Run], audio_files: list[AudioSegment]) -> AudioSegment:
    """Concatenate run audio with boundary-aware pauses."""
    if not audio_files:
        return AudioSegment.silent(duration=0)

    result = audio_files[0]
    for i in range(1, len(audio_files)):
        pause_ms = _calculate_pause(runs[i - 1], runs[i])
        result += AudioSegment.silent(duration=pause_ms, frame_rate=result.frame_rate) + audio_files[i]

    return result


def join_segments(parts: list[AudioSegment], pause_ms: int = PAUSE_SEGMENT_MS) -> AudioSegment:
    """Join delivered segments end to end with a fixed pause."""
    if not parts:
        return AudioSegment.silent(duration=0)

    result = parts[0]
    for part in parts[1:]:
        result += AudioSegment.silent(duration=pause_ms, frame_rate=result.frame_rate) + part
    return result
