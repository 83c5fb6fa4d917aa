"""Relocate trailing configuration instructions that would have no effect."""

import logging

from promptspeak.models import is_control

logger = logging.getLogger(__name__)


def count_control_suffix(instructions: list) -> int:
    """Length of the maximal run of control instructions at the end of the list."""
    count = 0
    while count < len(instructions) and is_control(instructions[-1 - count]):
        count += 1
    return count


def normalize_control_suffix(instructions: list) -> list:
    """Move a trailing run of control instructions to the front.

    Voice, style and volume settings only affect the instructions after
    them, so settings written at the end of a command line are treated as
    if they had been written first. The run keeps its internal order.
    A list made only of control instructions is returned unchanged.
    """
    suffix = count_control_suffix(instructions)

    if suffix == 0:
        return list(instructions)

    if suffix == len(instructions):
        logger.warning(
            "None of the given instructions do anything without something to read."
        )
        return list(instructions)

    logger.warning(
        "Instructions that configure the voice only affect the instructions after them. "
        "Moving %d trailing instruction(s) to the beginning.",
        suffix,
    )
    split = len(instructions) - suffix
    return list(instructions[split:]) + list(instructions[:split])
