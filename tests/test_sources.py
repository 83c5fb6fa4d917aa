"""Tests for reading text from files and URLs (Layer 1a)."""

import urllib.error
from unittest.mock import patch, MagicMock

import pytest

from promptspeak.sources import fetch, is_url


def test_is_url():
    assert is_url("https://example.com/a.txt")
    assert is_url("FILE:///tmp/a.txt")
    assert not is_url("notes.txt")
    assert not is_url("/tmp/notes.txt")


def test_fetch_local_file(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("Grüße aus Köln", encoding="utf-8")
    assert fetch(str(path)) == "Grüße aus Köln"


def test_fetch_missing_file(tmp_path):
    with pytest.raises(OSError, match="Could not read"):
        fetch(str(tmp_path / "missing.txt"))


def _response(body: bytes, charset=None):
    response = MagicMock()
    response.read.return_value = body
    response.headers.get_content_charset.return_value = charset
    response.__enter__.return_value = response
    return response


@patch("promptspeak.sources.urllib.request.urlopen")
def test_fetch_url_uses_charset(mock_open):
    mock_open.return_value = _response("café".encode("latin-1"), charset="latin-1")
    assert fetch("http://example.com/menu.txt") == "café"
    request = mock_open.call_args[0][0]
    assert request.get_header("User-agent").startswith("promptspeak")


@patch("promptspeak.sources.urllib.request.urlopen")
def test_fetch_url_defaults_to_utf8(mock_open):
    mock_open.return_value = _response("naïve".encode("utf-8"))
    assert fetch("https://example.com/a.txt") == "naïve"


@patch("promptspeak.sources.urllib.request.urlopen")
def test_fetch_url_failure_is_os_error(mock_open):
    mock_open.side_effect = urllib.error.URLError("no route")
    with pytest.raises(OSError, match="Could not download"):
        fetch("https://example.invalid/a.txt")
