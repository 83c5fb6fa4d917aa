"""Unroll Loop instructions into repeated, volume-scaled instruction runs."""

from promptspeak.constants import DEFAULT_OUTPUT_VOLUME
from promptspeak.models import FadeMode, Loop, OutputVolume, Reset


def fade_multiplier(fade: FadeMode, k: int, count: int) -> float:
    """Volume multiplier for iteration k (0-based) of a count-long loop."""
    if fade is FadeMode.FADE_IN:
        return (k + 1) / count
    if fade is FadeMode.FADE_OUT:
        return (count - k) / count
    return 1.0


def fade_multipliers(fade: FadeMode, count: int) -> list[float]:
    return [fade_multiplier(fade, k, count) for k in range(count)]


def scale_volume(volume: int, multiplier: float) -> int:
    """Scale a volume, rounding halves up."""
    return int(volume * multiplier + 0.5)


def _unroll(prefix: list, loop: Loop) -> list:
    """Repeat prefix loop.count times, scaling volumes per iteration."""
    result = []
    for k in range(loop.count):
        multiplier = fade_multiplier(loop.fade, k, loop.count)
        scaled = multiplier != 1.0

        if k > 0:
            result.append(Reset())
        if scaled:
            result.append(OutputVolume(scale_volume(DEFAULT_OUTPUT_VOLUME, multiplier)))

        for instruction in prefix:
            if isinstance(instruction, OutputVolume):
                result.append(OutputVolume(scale_volume(instruction.volume, multiplier)))
            elif isinstance(instruction, Reset):
                result.append(instruction)
                # Reset would otherwise bring the fade back to full volume
                if scaled:
                    result.append(OutputVolume(scale_volume(DEFAULT_OUTPUT_VOLUME, multiplier)))
            else:
                result.append(instruction)
    return result


def expand_loops(instructions: list) -> list:
    """Return a new list with every Loop replaced by its unrolled prefix.

    A Loop repeats everything before it, including the output of earlier
    loops, so loops compose: [A, Loop(2), B, Loop(2)] reads A A B A A B.
    """
    expanded = []
    for instruction in instructions:
        if isinstance(instruction, Loop):
            expanded = _unroll(expanded, instruction)
        else:
            expanded.append(instruction)
    return expanded
