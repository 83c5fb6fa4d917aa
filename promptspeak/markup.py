"""Turn an expanded instruction list into well-formed prompt segments.

The compiler state lives in an explicit MarkupState that transition()
advances one instruction at a time. Scopes (voice, style, sentence,
paragraph) nest on a stack; at most one scope of each kind is open and
closes always happen innermost-first. A new segment starts whenever the
output volume changes or an interactive segment begins, because volume is
fixed for the lifetime of one speech engine.
"""

import html
import random
from dataclasses import dataclass, field, replace

from promptspeak.constants import (
    DEFAULT_OUTPUT_VOLUME,
    SSML_LANG,
    SSML_NAMESPACE,
    SSML_RATES,
    SSML_EMPHASIS,
    SSML_VOLUMES,
)
from promptspeak.errors import OrderingError
from promptspeak.models import (
    BeginParagraph,
    BeginSentence,
    Emphasis,
    EndParagraph,
    EndSentence,
    Interactive,
    InteractiveContext,
    JsonTemplate,
    Loop,
    MarkupEvent,
    OutputVolume,
    PromptSegment,
    Rate,
    Reset,
    ScopeKind,
    StyleRecord,
    Text,
    Voice,
    VoiceRef,
    VoiceVolume,
)
from promptspeak.templates import expand_template

# Scopes that carry ambient settings rather than document structure
AMBIENT_KINDS = (ScopeKind.VOICE, ScopeKind.STYLE)


@dataclass
class MarkupState:
    stack: list[tuple[ScopeKind, object]] = field(default_factory=list)
    style: StyleRecord = StyleRecord()
    voice: VoiceRef | None = None
    volume: int = DEFAULT_OUTPUT_VOLUME
    current: PromptSegment = field(default_factory=PromptSegment)
    segments: list[PromptSegment] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random)
    # Volume restore scheduled by Reset, applied by the next instruction
    pending_volume: int | None = None


# --- Scope stack primitives ---

def _open(state: MarkupState, kind: ScopeKind, value=None) -> None:
    state.stack.append((kind, value))
    state.current.events.append(MarkupEvent("open", kind, value))


def _close_top(state: MarkupState) -> tuple[ScopeKind, object]:
    kind, value = state.stack.pop()
    state.current.events.append(MarkupEvent("close", kind, value))
    return kind, value


def _close_all(state: MarkupState) -> None:
    while state.stack:
        _close_top(state)


def _is_open(state: MarkupState, kind: ScopeKind) -> bool:
    return any(k is kind for k, _ in state.stack)


def _close_through(state: MarkupState, kind: ScopeKind) -> list[tuple[ScopeKind, object]]:
    """Close scopes down to and including kind.

    Returns the scopes that were nested inside it, outermost first, so the
    caller can reopen them.
    """
    nested = []
    while True:
        closed = _close_top(state)
        if closed[0] is kind:
            break
        nested.append(closed)
    nested.reverse()
    return nested


def _reopen(state: MarkupState, scopes: list[tuple[ScopeKind, object]]) -> None:
    for kind, value in scopes:
        _open(state, kind, value)


def _replace_scope(state: MarkupState, kind: ScopeKind, value) -> None:
    """Swap the open scope of kind for a new one, keeping anything nested inside."""
    nested = _close_through(state, kind) if _is_open(state, kind) else []
    if value is not None:
        _open(state, kind, value)
    _reopen(state, nested)


def _close_structure(state: MarkupState, kind: ScopeKind) -> list[tuple[ScopeKind, object]]:
    """Close kind and anything structural inside it.

    Returns the voice and style scopes that were nested inside, which carry
    over to whatever comes next.
    """
    return [s for s in _close_through(state, kind) if s[0] in AMBIENT_KINDS]


def _begin(state: MarkupState, kind: ScopeKind) -> None:
    # A new sentence or paragraph ends the previous one
    nested = _close_structure(state, kind) if _is_open(state, kind) else []
    _open(state, kind)
    _reopen(state, nested)


def _end(state: MarkupState, kind: ScopeKind, name: str) -> None:
    if not _is_open(state, kind):
        raise OrderingError(f"{name} without a matching begin in the current segment")
    _reopen(state, _close_structure(state, kind))


# --- Segment boundaries ---

def _finalize(state: MarkupState) -> None:
    _close_all(state)
    state.current.volume = state.volume
    if state.current.has_text:
        state.segments.append(state.current)
    state.current = PromptSegment()


def _reopen_ambient(state: MarkupState) -> None:
    if state.voice is not None:
        _open(state, ScopeKind.VOICE, state.voice)
    if not state.style.is_default:
        _open(state, ScopeKind.STYLE, state.style)


def _change_volume(state: MarkupState, volume: int) -> None:
    if volume != state.volume:
        _finalize(state)
        state.volume = volume
        _reopen_ambient(state)


def _apply_pending(state: MarkupState) -> None:
    if state.pending_volume is not None:
        volume, state.pending_volume = state.pending_volume, None
        _change_volume(state, volume)


def _set_style(state: MarkupState, **changes) -> None:
    state.style = replace(state.style, **changes)
    _replace_scope(state, ScopeKind.STYLE, state.style)


def transition(state: MarkupState, instruction) -> None:
    """Apply one instruction to the compiler state."""
    if not isinstance(instruction, (OutputVolume, Reset)):
        _apply_pending(state)

    if isinstance(instruction, Text):
        state.current.events.append(MarkupEvent("text", value=instruction.text))
    elif isinstance(instruction, JsonTemplate):
        text = expand_template(instruction.raw_json, state.rng)
        state.current.events.append(MarkupEvent("text", value=text))
    elif isinstance(instruction, Voice):
        state.voice = instruction.voice
        _replace_scope(state, ScopeKind.VOICE, instruction.voice)
    elif isinstance(instruction, Rate):
        _set_style(state, rate=instruction.rate)
    elif isinstance(instruction, Emphasis):
        _set_style(state, emphasis=instruction.emphasis)
    elif isinstance(instruction, VoiceVolume):
        _set_style(state, volume=instruction.volume)
    elif isinstance(instruction, BeginSentence):
        _begin(state, ScopeKind.SENTENCE)
    elif isinstance(instruction, BeginParagraph):
        _begin(state, ScopeKind.PARAGRAPH)
    elif isinstance(instruction, EndSentence):
        _end(state, ScopeKind.SENTENCE, "end of sentence")
    elif isinstance(instruction, EndParagraph):
        _end(state, ScopeKind.PARAGRAPH, "end of paragraph")
    elif isinstance(instruction, OutputVolume):
        state.pending_volume = None
        _change_volume(state, instruction.volume)
    elif isinstance(instruction, Interactive):
        _finalize(state)
        state.segments.append(PromptSegment(
            volume=state.volume,
            interactive=InteractiveContext(voice=state.voice, style=state.style),
        ))
        _reopen_ambient(state)
    elif isinstance(instruction, Reset):
        _close_all(state)
        state.style = StyleRecord()
        state.voice = None
        # The volume in effect belongs to the text already emitted; the
        # default comes back with whatever follows.
        state.pending_volume = DEFAULT_OUTPUT_VOLUME
    elif isinstance(instruction, Loop):
        raise TypeError("Loop instructions must be expanded before building segments")
    else:
        raise TypeError(f"Don't know what to do with {instruction!r}")


def finish(state: MarkupState) -> list[PromptSegment]:
    _finalize(state)
    return state.segments


def build_segments(instructions: list, rng: random.Random | None = None) -> list[PromptSegment]:
    """Run the state machine over a fully expanded instruction list."""
    state = MarkupState(rng=rng or random.Random())
    for instruction in instructions:
        transition(state, instruction)
    return finish(state)


def check_balanced(segment: PromptSegment) -> None:
    """Raise OrderingError unless every open has a matching close in stack order."""
    stack = []
    for event in segment.events:
        if event.action == "open":
            if any(kind is event.kind for kind in stack):
                raise OrderingError(f"{event.kind.value} scope opened twice")
            stack.append(event.kind)
        elif event.action == "close":
            if not stack or stack[-1] is not event.kind:
                raise OrderingError(f"{event.kind.value} scope closed out of order")
            stack.pop()
    if stack:
        raise OrderingError(f"{len(stack)} scope(s) left open")


def line_segment(context: InteractiveContext, line: str, volume: int = DEFAULT_OUTPUT_VOLUME) -> PromptSegment:
    """Build the prompt for one line typed during an interactive segment."""
    state = MarkupState(voice=context.voice, style=context.style, volume=volume)
    _reopen_ambient(state)
    state.current.events.append(MarkupEvent("text", value=line))
    _close_all(state)
    state.current.volume = volume
    return state.current


# --- SSML rendering ---

def _style_elements(style: StyleRecord) -> list[tuple[str, str]]:
    elements = []
    attrs = ""
    if style.rate:
        attrs += f' rate="{SSML_RATES[style.rate]}"'
    if style.volume:
        attrs += f' volume="{SSML_VOLUMES[style.volume]}"'
    if attrs:
        elements.append(("prosody", attrs))
    if style.emphasis:
        elements.append(("emphasis", f' level="{SSML_EMPHASIS[style.emphasis]}"'))
    return elements


def _elements(kind: ScopeKind, value) -> list[tuple[str, str]]:
    """(tag, attributes) pairs a scope renders as, outermost first."""
    if kind is ScopeKind.VOICE:
        return [("voice", f' name="{html.escape(value.id)}"')]
    if kind is ScopeKind.STYLE:
        return _style_elements(value)
    if kind is ScopeKind.SENTENCE:
        return [("s", "")]
    return [("p", "")]


def render_ssml(segment: PromptSegment, lang: str = SSML_LANG) -> str:
    """Render a regular segment as an SSML 1.0 document."""
    if segment.is_interactive:
        raise ValueError("Interactive segments are rendered one input line at a time")

    parts = [f'<speak version="1.0" xmlns="{SSML_NAMESPACE}" xml:lang="{lang}">']
    previous = None
    for event in segment.events:
        if event.action == "text":
            # Adjacent words from separate instructions stay separate words
            if previous == "text":
                parts.append(" ")
            parts.append(html.escape(event.value))
        elif event.action == "open":
            parts.extend(f"<{tag}{attrs}>" for tag, attrs in _elements(event.kind, event.value))
        else:
            parts.extend(f"</{tag}>" for tag, _ in reversed(_elements(event.kind, event.value)))
        previous = event.action
    parts.append("</speak>")
    return "".join(parts)
