"""TTS generation via edge-tts with retry logic."""

import asyncio
import logging
import os
import time

import edge_tts

from promptspeak.constants import (
    TTS_RETRY_COUNT,
    TTS_RETRY_BASE_DELAY,
    EDGE_RATES,
    EDGE_VOLUMES,
    EDGE_PITCHES,
)
from promptspeak.errors import SynthesisError
from promptspeak.models import StyleRecord

logger = logging.getLogger(__name__)


def prosody_for(style: StyleRecord) -> dict[str, str]:
    """edge-tts rate/volume/pitch arguments for an accumulated style."""
    return {
        "rate": EDGE_RATES[style.rate],
        "volume": EDGE_VOLUMES[style.volume],
        "pitch": EDGE_PITCHES[style.emphasis],
    }


def generate_single(
    text: str,
    voice: str,
    output_path: str,
    rate: str = "+0%",
    volume: str = "+0%",
    pitch: str = "+0Hz",
) -> None:
    """Generate a single TTS clip with retry logic.

    Sync wrapper around edge_tts.Communicate(). Retries on network errors,
    HTTP errors, or 0-byte output files. Raises SynthesisError once every
    attempt has failed.
    """
    last_error = None
    for attempt in range(TTS_RETRY_COUNT):
        try:
            communicate = edge_tts.Communicate(text, voice, rate=rate, volume=volume, pitch=pitch)
            asyncio.run(communicate.save(output_path))

            # Validate output: 0-byte file counts as failure
            if os.path.exists(output_path) and os.path.getsize(output_path) > 0:
                return

            last_error = SynthesisError(f"TTS produced 0-byte file for: {text[:50]}...")
        except Exception as e:
            last_error = e

        logger.warning("TTS attempt %d/%d failed: %s", attempt + 1, TTS_RETRY_COUNT, last_error)

        # Exponential backoff
        if attempt < TTS_RETRY_COUNT - 1:
            delay = TTS_RETRY_BASE_DELAY * (2 ** attempt)
            time.sleep(delay)

    if isinstance(last_error, SynthesisError):
        raise last_error
    raise SynthesisError(f"Speech synthesis failed: {last_error}") from last_error
