"""Read text from a file path or a URL."""

import urllib.error
import urllib.parse
import urllib.request

URL_SCHEMES = ("http", "https", "ftp", "file")
USER_AGENT = "promptspeak/1.0"


def is_url(location: str) -> bool:
    return urllib.parse.urlparse(location).scheme.lower() in URL_SCHEMES


def fetch(location: str) -> str:
    """Return the text content of a local file or URL.

    Raises OSError (IOError) if the content cannot be read.
    """
    if is_url(location):
        request = urllib.request.Request(location, headers={"User-Agent": USER_AGENT})
        try:
            with urllib.request.urlopen(request) as response:
                charset = response.headers.get_content_charset() or "utf-8"
                return response.read().decode(charset, errors="replace")
        except urllib.error.URLError as e:
            raise OSError(f"Could not download {location}: {e.reason}") from e

    try:
        with open(location, encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise OSError(f"Could not read {location}: {e.strerror or e}") from e
