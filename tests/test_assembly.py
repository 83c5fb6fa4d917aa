"""Tests for assembly module (Layer 2)."""

from pydub import AudioSegment

from promptspeak.assembly import _calculate_pause, concatenate_runs, join_segments
from promptspeak.constants import (
    PAUSE_PARAGRAPH_MS,
    PAUSE_SAME_RUN_MS,
    PAUSE_SEGMENT_MS,
    PAUSE_SENTENCE_MS,
    PAUSE_VOICE_CHANGE_MS,
)
from promptspeak.models import Run, ScopeKind, StyleRecord


def _run(voice=None, boundary=None, style=StyleRecord()):
    """Helper to create a Run."""
    return Run(text="test", voice=voice, style=style, boundary=boundary)


def _audio(duration_ms=500):
    """Helper to create a silent AudioSegment."""
    return AudioSegment.silent(duration=duration_ms)


# --- Pause rules ---

def test_style_change_pause():
    assert _calculate_pause(_run(), _run(style=StyleRecord(rate=2))) == PAUSE_SAME_RUN_MS


def test_voice_change_pause(aria, guy):
    assert _calculate_pause(_run(aria), _run(guy)) == PAUSE_VOICE_CHANGE_MS


def test_sentence_pause():
    assert _calculate_pause(_run(), _run(boundary=ScopeKind.SENTENCE)) == PAUSE_SENTENCE_MS


def test_paragraph_with_voice_change_uses_max(aria, guy):
    """Multiple rules apply: the longest pause wins."""
    pause = _calculate_pause(_run(aria), _run(guy, boundary=ScopeKind.PARAGRAPH))
    assert pause == max(PAUSE_PARAGRAPH_MS, PAUSE_VOICE_CHANGE_MS)


# --- Concatenation ---

def test_concatenate_single_run():
    result = concatenate_runs([_run()], [_audio(500)])
    assert len(result) == 500


def test_concatenate_inserts_pauses(aria, guy):
    runs = [_run(aria), _run(guy), _run(guy, boundary=ScopeKind.PARAGRAPH)]
    result = concatenate_runs(runs, [_audio(500)] * 3)
    expected = 1500 + PAUSE_VOICE_CHANGE_MS + PAUSE_PARAGRAPH_MS
    assert abs(len(result) - expected) < 5


def test_concatenate_empty():
    assert len(concatenate_runs([], [])) == 0


def test_join_segments_fixed_pause():
    result = join_segments([_audio(300), _audio(300), _audio(300)])
    assert abs(len(result) - (900 + 2 * PAUSE_SEGMENT_MS)) < 5


def test_join_segments_empty():
    assert len(join_segments([])) == 0
