"""Tests for exporter module (Layer 2)."""

import json
import os
from unittest.mock import patch

from pydub import AudioSegment

from promptspeak.compiler import compile_instructions
from promptspeak.constants import OUTPUT_BITRATE, VERSION
from promptspeak.exporter import export, manifest_path_for
from promptspeak.models import Interactive, OutputVolume, Text, Voice


def _fake_export(self, out_f, format="mp3", **kwargs):
    """Stand-in for AudioSegment.export that skips the ffmpeg encode."""
    with open(out_f, "wb") as f:
        f.write(b"ID3")


def _make_settings():
    return {"default_voice": "en-US-AriaNeural", "seed": 7, "instructions": 4}


def test_manifest_path_for():
    assert manifest_path_for("out/prompt.mp3") == os.path.join("out", "prompt.json")
    assert manifest_path_for("prompt") == "prompt.json"


@patch.object(AudioSegment, "export", autospec=True, side_effect=_fake_export)
def test_export_creates_files(mock_export, tmp_path, aria):
    """MP3 and manifest both written; directories created as needed."""
    segments = compile_instructions([Voice(aria), Text("hi"), OutputVolume(50), Text("there")])
    output = str(tmp_path / "nested" / "prompt.mp3")
    path = export(AudioSegment.silent(duration=2500), output, segments, _make_settings(), title="Greeting")
    assert path == output
    assert os.path.exists(output)
    assert os.path.exists(manifest_path_for(output))

    _, kwargs = mock_export.call_args
    assert kwargs["bitrate"] == OUTPUT_BITRATE
    assert kwargs["tags"] == {"title": "Greeting"}


@patch.object(AudioSegment, "export", autospec=True, side_effect=_fake_export)
def test_manifest_contents(mock_export, tmp_path, aria):
    segments = compile_instructions([Voice(aria), Text("hi"), Interactive(), OutputVolume(50), Text("there")])
    output = str(tmp_path / "prompt.mp3")
    export(AudioSegment.silent(duration=2500), output, segments, _make_settings())

    with open(manifest_path_for(output)) as f:
        manifest = json.load(f)

    assert manifest["output"] == "prompt.mp3"
    assert manifest["promptspeak_version"] == VERSION
    assert manifest["settings"] == _make_settings()
    assert manifest["stats"] == {"segments": 3, "duration_seconds": 2.5}
    assert "generated_at" in manifest

    first, marker, last = manifest["segments"]
    assert first["interactive"] is False
    assert '<voice name="en-US-AriaNeural">hi</voice>' in first["ssml"]
    assert marker == {"volume": 100, "interactive": True, "voice": "en-US-AriaNeural"}
    assert last["volume"] == 50


@patch.object(AudioSegment, "export", autospec=True, side_effect=_fake_export)
def test_export_without_title_has_no_tags(mock_export, tmp_path):
    export(AudioSegment.silent(duration=100), str(tmp_path / "a.mp3"), [], {})
    _, kwargs = mock_export.call_args
    assert kwargs["tags"] == {}
