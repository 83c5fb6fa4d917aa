"""Export delivered audio as MP3 with a JSON manifest."""

import json
import os
from datetime import datetime, timezone

from pydub import AudioSegment

from promptspeak.constants import OUTPUT_BITRATE, VERSION
from promptspeak.markup import render_ssml
from promptspeak.models import PromptSegment


def manifest_path_for(output_path: str) -> str:
    return os.path.splitext(output_path)[0] + ".json"


def _describe_segment(segment: PromptSegment) -> dict:
    if segment.is_interactive:
        context = segment.interactive
        return {
            "volume": segment.volume,
            "interactive": True,
            "voice": context.voice.id if context.voice else None,
        }
    return {
        "volume": segment.volume,
        "interactive": False,
        "ssml": render_ssml(segment),
    }


def export(
    audio: AudioSegment,
    output_path: str,
    segments: list[PromptSegment],
    settings: dict,
    title: str = "",
) -> str:
    """Export audio as MP3 plus a provenance manifest.

    Creates:
      - <output_path> (the spoken prompts)
      - <output stem>.json (segment list, settings, duration)

    Returns path to the MP3 file.
    """
    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    tags = {"title": title} if title else {}
    audio.export(output_path, format="mp3", bitrate=OUTPUT_BITRATE, tags=tags)

    manifest = {
        "output": os.path.basename(output_path),
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "promptspeak_version": VERSION,
        "segments": [_describe_segment(s) for s in segments],
        "settings": settings,
        "stats": {
            "segments": len(segments),
            "duration_seconds": round(len(audio) / 1000, 1),
        },
    }

    with open(manifest_path_for(output_path), "w") as f:
        json.dump(manifest, f, indent=2)

    return output_path
