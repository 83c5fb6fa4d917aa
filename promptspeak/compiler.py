"""Instruction-to-prompt pipeline: normalize, expand loops, build segments."""

import logging
import random

from promptspeak.loops import expand_loops
from promptspeak.markup import build_segments, check_balanced
from promptspeak.models import PromptSegment
from promptspeak.normalizer import normalize_control_suffix

logger = logging.getLogger(__name__)


def compile_instructions(
    instructions: list,
    rng: random.Random | None = None,
) -> list[PromptSegment]:
    """Compile command-line instructions into deliverable prompt segments.

    Raises OrderingError or TemplateError before anything is delivered,
    including when a finished segment leaves a scope unbalanced.
    """
    normalized = normalize_control_suffix(instructions)
    expanded = expand_loops(normalized)
    logger.debug("Expanded %d instruction(s) into %d", len(instructions), len(expanded))

    segments = build_segments(expanded, rng=rng)
    for segment in segments:
        check_balanced(segment)
    logger.info("Compiled %d prompt segment(s)", len(segments))
    return segments
