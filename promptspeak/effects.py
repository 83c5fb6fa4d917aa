"""Audio effects: output-device volume applied to rendered segments."""

import numpy as np
from pydub import AudioSegment

from promptspeak.constants import OUTPUT_VOLUME_MAX


def apply_output_volume(audio: AudioSegment, volume: int) -> AudioSegment:
    """Scale samples linearly to volume percent of full scale.

    100 returns the audio unchanged, 0 returns silence of the same length.
    """
    if volume >= OUTPUT_VOLUME_MAX:
        return audio

    samples = np.array(audio.get_array_of_samples())
    limits = np.iinfo(samples.dtype)
    factor = max(volume, 0) / OUTPUT_VOLUME_MAX

    scaled = np.round(samples.astype(np.float64) * factor)
    scaled = np.clip(scaled, limits.min, limits.max).astype(samples.dtype)

    return AudioSegment(
        data=scaled.tobytes(),
        sample_width=audio.sample_width,
        frame_rate=audio.frame_rate,
        channels=audio.channels,
    )
