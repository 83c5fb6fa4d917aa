"""Data models for instructions, markup events and prompt segments."""

from dataclasses import dataclass, field
from enum import Enum

from promptspeak.constants import (
    RATE_MAX,
    EMPHASIS_MAX,
    VOICE_VOLUME_MAX,
    OUTPUT_VOLUME_MAX,
    DEFAULT_OUTPUT_VOLUME,
)
from promptspeak.errors import ConfigurationError


class FadeMode(Enum):
    LEVEL = "level"
    FADE_IN = "fade-in"
    FADE_OUT = "fade-out"


class ScopeKind(Enum):
    VOICE = "voice"
    STYLE = "style"        # rate + emphasis + voice volume
    SENTENCE = "sentence"
    PARAGRAPH = "paragraph"


@dataclass(frozen=True)
class VoiceRef:
    id: str                # engine voice id, e.g. "en-US-AriaNeural"
    name: str = ""         # display name


@dataclass(frozen=True)
class StyleRecord:
    rate: int = 0          # 0 means "not set" for every field
    emphasis: int = 0
    volume: int = 0

    @property
    def is_default(self) -> bool:
        return not (self.rate or self.emphasis or self.volume)


def _check_range(kind: str, value, upper: int, lower: int = 0) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not lower <= value <= upper:
        raise ConfigurationError(
            f"{kind} must be a number from {lower} to {upper}, got {value!r}"
        )


# --- Instructions ---

@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Voice:
    voice: VoiceRef | None   # None when the catalog found no matching voice


@dataclass(frozen=True)
class Rate:
    rate: int

    def __post_init__(self):
        _check_range("rate", self.rate, RATE_MAX)


@dataclass(frozen=True)
class Emphasis:
    emphasis: int

    def __post_init__(self):
        _check_range("emphasis", self.emphasis, EMPHASIS_MAX)


@dataclass(frozen=True)
class VoiceVolume:
    volume: int

    def __post_init__(self):
        _check_range("volume", self.volume, VOICE_VOLUME_MAX)


@dataclass(frozen=True)
class OutputVolume:
    volume: int

    def __post_init__(self):
        _check_range("output volume", self.volume, OUTPUT_VOLUME_MAX)


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class BeginSentence:
    pass


@dataclass(frozen=True)
class EndSentence:
    pass


@dataclass(frozen=True)
class BeginParagraph:
    pass


@dataclass(frozen=True)
class EndParagraph:
    pass


@dataclass(frozen=True)
class Loop:
    count: int
    fade: FadeMode = FadeMode.LEVEL

    def __post_init__(self):
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 1:
            raise ConfigurationError(f"loop count must be at least 1, got {self.count!r}")
        if not isinstance(self.fade, FadeMode):
            raise ConfigurationError(f"unknown fade mode: {self.fade!r}")


@dataclass(frozen=True)
class Interactive:
    pass


@dataclass(frozen=True)
class JsonTemplate:
    raw_json: str


Instruction = (
    Text | Voice | Rate | Emphasis | VoiceVolume | OutputVolume | Reset
    | BeginSentence | EndSentence | BeginParagraph | EndParagraph
    | Loop | Interactive | JsonTemplate
)

# Instructions that only configure what follows them
CONTROL_TYPES = (Voice, Reset, Rate, Emphasis, VoiceVolume, OutputVolume)


def is_control(instruction) -> bool:
    return isinstance(instruction, CONTROL_TYPES)


# --- Compiler output ---

@dataclass(frozen=True)
class MarkupEvent:
    action: str                  # "open", "close" or "text"
    kind: ScopeKind | None = None
    value: object = None         # VoiceRef / StyleRecord for scopes, str for text


@dataclass(frozen=True)
class InteractiveContext:
    voice: VoiceRef | None = None
    style: StyleRecord = StyleRecord()


@dataclass
class PromptSegment:
    events: list[MarkupEvent] = field(default_factory=list)
    volume: int = DEFAULT_OUTPUT_VOLUME
    interactive: InteractiveContext | None = None

    @property
    def is_interactive(self) -> bool:
        return self.interactive is not None

    @property
    def has_text(self) -> bool:
        return any(e.action == "text" for e in self.events)

    @property
    def text(self) -> str:
        """Literal text of the segment with markup stripped."""
        return " ".join(e.value for e in self.events if e.action == "text")


@dataclass
class Run:
    text: str
    voice: VoiceRef | None = None
    style: StyleRecord = StyleRecord()
    boundary: ScopeKind | None = None   # SENTENCE / PARAGRAPH break before this run
