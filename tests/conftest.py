"""Shared fixtures for promptspeak tests."""

import random

import numpy as np
import pytest
from pydub import AudioSegment

from promptspeak.models import VoiceRef


def make_tone(duration_ms=100, amplitude=8000, frame_rate=24000):
    """Create a mono 16-bit square-ish tone with real (non-silent) samples."""
    count = int(frame_rate * duration_ms / 1000)
    samples = np.where(np.arange(count) % 20 < 10, amplitude, -amplitude).astype(np.int16)
    return AudioSegment(
        data=samples.tobytes(),
        sample_width=2,
        frame_rate=frame_rate,
        channels=1,
    )


@pytest.fixture
def aria():
    return VoiceRef(id="en-US-AriaNeural", name="Aria")


@pytest.fixture
def guy():
    return VoiceRef(id="en-US-GuyNeural", name="Guy")


@pytest.fixture
def rng():
    """Seeded random source so template picks are reproducible."""
    return random.Random(1234)


@pytest.fixture
def tone():
    return make_tone


@pytest.fixture
def fake_synth():
    """Synthesizer stand-in that records (text, voice, style) and returns a 100ms tone."""
    calls = []

    def synthesize(run, voice):
        calls.append((run.text, voice, run.style))
        return make_tone(100)

    synthesize.calls = calls
    return synthesize
