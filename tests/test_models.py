"""Tests for constants, errors and models (Layer 0)."""

import pytest

from promptspeak import constants
from promptspeak.errors import ConfigurationError, OrderingError, PromptError, SynthesisError, TemplateError
from promptspeak.models import (
    Emphasis,
    FadeMode,
    InteractiveContext,
    Loop,
    MarkupEvent,
    OutputVolume,
    PromptSegment,
    Rate,
    Reset,
    StyleRecord,
    Text,
    Voice,
    VoiceVolume,
    is_control,
)


def test_constants_exist():
    """All module-level constants are defined."""
    expected = [
        "RATE_MAX",
        "EMPHASIS_MAX",
        "VOICE_VOLUME_MAX",
        "OUTPUT_VOLUME_MAX",
        "DEFAULT_OUTPUT_VOLUME",
        "TEMPLATE_START",
        "MAX_TEMPLATE_SUBSTITUTIONS",
        "PAUSE_SAME_RUN_MS",
        "PAUSE_VOICE_CHANGE_MS",
        "PAUSE_SENTENCE_MS",
        "PAUSE_PARAGRAPH_MS",
        "TTS_RETRY_COUNT",
        "TTS_RETRY_BASE_DELAY",
        "DEFAULT_VOICE",
        "OUTPUT_BITRATE",
    ]
    for name in expected:
        assert hasattr(constants, name), f"Missing constant: {name}"


def test_every_level_has_engine_mapping():
    """Each non-zero style level maps to both an SSML and an edge-tts value."""
    for level in range(1, constants.RATE_MAX + 1):
        assert level in constants.SSML_RATES and level in constants.EDGE_RATES
    for level in range(1, constants.EMPHASIS_MAX + 1):
        assert level in constants.SSML_EMPHASIS and level in constants.EDGE_PITCHES
    for level in range(1, constants.VOICE_VOLUME_MAX + 1):
        assert level in constants.SSML_VOLUMES and level in constants.EDGE_VOLUMES


# --- Errors ---

def test_error_hierarchy():
    """Every deliberate error derives from PromptError."""
    for cls in (ConfigurationError, OrderingError, TemplateError, SynthesisError):
        assert issubclass(cls, PromptError)


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)


# --- Parameter ranges ---

@pytest.mark.parametrize("cls,upper", [
    (Rate, constants.RATE_MAX),
    (Emphasis, constants.EMPHASIS_MAX),
    (VoiceVolume, constants.VOICE_VOLUME_MAX),
    (OutputVolume, constants.OUTPUT_VOLUME_MAX),
])
def test_range_bounds_accepted(cls, upper):
    """Both ends of each range are valid."""
    cls(0)
    cls(upper)


@pytest.mark.parametrize("cls,bad", [
    (Rate, 6),
    (Rate, -1),
    (Emphasis, 5),
    (VoiceVolume, 8),
    (OutputVolume, 101),
    (OutputVolume, True),
    (Rate, "3"),
])
def test_range_violation_rejected(cls, bad):
    """Out-of-range or non-integer values raise ConfigurationError."""
    with pytest.raises(ConfigurationError):
        cls(bad)


def test_loop_requires_positive_count():
    with pytest.raises(ConfigurationError, match="at least 1"):
        Loop(0)
    assert Loop(1).fade is FadeMode.LEVEL


def test_loop_rejects_unknown_fade():
    with pytest.raises(ConfigurationError):
        Loop(2, "sideways")


def test_control_classification(aria):
    """Voice, Reset and the style/volume settings are control instructions."""
    assert is_control(Voice(aria))
    assert is_control(Reset())
    assert is_control(Rate(2))
    assert is_control(OutputVolume(40))
    assert not is_control(Text("hi"))
    assert not is_control(Loop(2))


def test_instructions_are_values():
    """Equal payloads compare equal, so instruction lists can be compared."""
    assert Rate(2) == Rate(2)
    assert Reset() == Reset()
    assert Text("a") != Text("b")


# --- Style and segments ---

def test_style_record_default():
    assert StyleRecord().is_default
    assert not StyleRecord(rate=1).is_default


def test_prompt_segment_text_and_flags(aria):
    """Text joins text events; interactive flag comes from the context."""
    segment = PromptSegment(events=[
        MarkupEvent("open", value=aria),
        MarkupEvent("text", value="hello"),
        MarkupEvent("text", value="world"),
        MarkupEvent("close", value=aria),
    ])
    assert segment.has_text
    assert segment.text == "hello world"
    assert not segment.is_interactive
    assert segment.volume == constants.DEFAULT_OUTPUT_VOLUME

    marker = PromptSegment(interactive=InteractiveContext(voice=aria))
    assert marker.is_interactive
    assert not marker.has_text
