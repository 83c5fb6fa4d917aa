"""Deliver compiled prompt segments to the speech engine, in order."""

import logging
import os
import tempfile
from collections.abc import Callable, Iterable

from pydub import AudioSegment
from pydub.playback import play

from promptspeak.assembly import concatenate_runs, join_segments
from promptspeak.constants import DEFAULT_OUTPUT_VOLUME, DEFAULT_VOICE
from promptspeak.effects import apply_output_volume
from promptspeak.markup import line_segment
from promptspeak.models import PromptSegment, Run, ScopeKind, StyleRecord
from promptspeak.tts import generate_single, prosody_for

logger = logging.getLogger(__name__)

Sink = Callable[[AudioSegment], None]
Synthesizer = Callable[[Run, str], AudioSegment]


def segment_runs(segment: PromptSegment) -> list[Run]:
    """Flatten markup into runs of text that share a voice and style.

    Consecutive text with the same voice and style and no sentence or
    paragraph break between it is merged into a single run.
    """
    runs = []
    voice = None
    style = StyleRecord()
    boundary = None

    for event in segment.events:
        if event.action == "text":
            if not event.value.strip():
                continue
            last = runs[-1] if runs else None
            if last and boundary is None and last.voice == voice and last.style == style:
                last.text = f"{last.text} {event.value}"
            else:
                runs.append(Run(text=event.value, voice=voice, style=style, boundary=boundary))
            boundary = None
        elif event.kind is ScopeKind.VOICE:
            voice = event.value if event.action == "open" else None
        elif event.kind is ScopeKind.STYLE:
            style = event.value if event.action == "open" else StyleRecord()
        elif runs and boundary is not ScopeKind.PARAGRAPH:
            boundary = event.kind

    return runs


def synthesize_run(run: Run, voice: str) -> AudioSegment:
    """Synthesize one run with edge-tts and decode it."""
    with tempfile.TemporaryDirectory(prefix="promptspeak-") as work_dir:
        path = os.path.join(work_dir, "run.mp3")
        generate_single(run.text, voice, path, **prosody_for(run.style))
        return AudioSegment.from_mp3(path)


class SpeechEngine:
    """Renders prompt segments at one output volume.

    Volume belongs to the engine, so every segment gets a fresh engine.
    """

    def __init__(
        self,
        volume: int = DEFAULT_OUTPUT_VOLUME,
        default_voice: str = DEFAULT_VOICE,
        synthesize: Synthesizer | None = None,
    ):
        self.volume = volume
        self.default_voice = default_voice
        self.synthesize = synthesize or synthesize_run

    def render(self, segment: PromptSegment) -> AudioSegment:
        runs = segment_runs(segment)
        audio = [
            self.synthesize(run, run.voice.id if run.voice else self.default_voice)
            for run in runs
        ]
        return apply_output_volume(concatenate_runs(runs, audio), self.volume)


def deliver(
    segment: PromptSegment,
    sink: Sink,
    default_voice: str = DEFAULT_VOICE,
    synthesize: Synthesizer | None = None,
) -> None:
    """Render one regular segment and hand the audio to sink."""
    if not segment.has_text:
        return
    engine = SpeechEngine(segment.volume, default_voice, synthesize)
    sink(engine.render(segment))


def deliver_interactive(
    segment: PromptSegment,
    lines: Iterable[str],
    sink: Sink,
    default_voice: str = DEFAULT_VOICE,
    synthesize: Synthesizer | None = None,
) -> int:
    """Speak each input line as it arrives until the input ends.

    Returns the number of lines spoken. Blank lines are skipped.
    """
    spoken = 0
    for line in lines:
        if not line.strip():
            continue
        prompt = line_segment(segment.interactive, line, segment.volume)
        deliver(prompt, sink, default_voice, synthesize)
        spoken += 1
    logger.info("Interactive input ended after %d line(s)", spoken)
    return spoken


def deliver_all(
    segments: list[PromptSegment],
    sink: Sink,
    lines: Iterable[str] | None = None,
    default_voice: str = DEFAULT_VOICE,
    synthesize: Synthesizer | None = None,
) -> None:
    """Deliver segments strictly in order; each call returns before the next starts."""
    total = len(segments)
    for i, segment in enumerate(segments):
        if segment.is_interactive:
            if lines is None:
                logger.warning("Segment %d/%d reads live input but none is available", i + 1, total)
                continue
            logger.info("Segment %d/%d: interactive at volume %d", i + 1, total, segment.volume)
            deliver_interactive(segment, lines, sink, default_voice, synthesize)
        else:
            logger.info("Segment %d/%d: volume %d", i + 1, total, segment.volume)
            deliver(segment, sink, default_voice, synthesize)


class AudioCollector:
    """Sink that keeps delivered audio for export instead of playing it."""

    def __init__(self):
        self.parts: list[AudioSegment] = []

    def __call__(self, audio: AudioSegment) -> None:
        self.parts.append(audio)

    def combined(self) -> AudioSegment:
        return join_segments(self.parts)


def play_audio(audio: AudioSegment) -> None:
    """Sink that plays audio on the default output device."""
    play(audio)
