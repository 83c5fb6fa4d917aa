"""Randomized text templates driven by a JSON document.

The document is an object whose keys act as non-terminals. Expansion
starts from the string "SENTENCES" and repeatedly replaces the first
occurrence of an upper-cased key with a rendering of its value:

    {"SENTENCES": ["GREETING NAME!"],
     "GREETING": ["Hello", "Good morning"],
     "NAME": ["world", ["dear", "friend"]]}

may read "Good morning dear friend!". Strings render as themselves; an
array picks one element at random; an array picked from an array (a
sequence) renders every element and joins them with spaces.

Keys are tried in document order. Substituted text is scanned again, so
a value may mention other keys.
"""

import json
import random

from promptspeak.constants import MAX_TEMPLATE_SUBSTITUTIONS, TEMPLATE_START
from promptspeak.errors import TemplateError


def load_template(raw_json: str) -> dict:
    """Parse and validate a template document."""
    try:
        data = json.loads(raw_json)
    except json.JSONDecodeError as e:
        raise TemplateError(f"Template is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise TemplateError("Template must be a JSON object at the top level")
    if any(not key for key in data):
        raise TemplateError("Template keys must not be empty")
    return data


def _render_pick(value, rng: random.Random) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        if not value:
            raise TemplateError("Cannot pick from an empty array")
        return _render_sequence(rng.choice(value), rng)
    raise TemplateError(f"Cannot render JSON value of type {type(value).__name__}: {value!r}")


def _render_sequence(value, rng: random.Random) -> str:
    if isinstance(value, list):
        return " ".join(_render_pick(item, rng) for item in value)
    return _render_pick(value, rng)


def _first_match(working: str, data: dict):
    for key, value in data.items():
        token = key.upper()
        if token in working:
            return token, value
    return None


def expand_template(
    raw_json: str,
    rng: random.Random | None = None,
    start: str = TEMPLATE_START,
) -> str:
    """Expand start against the template document until no key remains."""
    data = load_template(raw_json)
    if rng is None:
        rng = random.Random()

    working = start
    for _ in range(MAX_TEMPLATE_SUBSTITUTIONS):
        match = _first_match(working, data)
        if match is None:
            return working
        token, value = match
        working = working.replace(token, _render_pick(value, rng), 1)

    raise TemplateError(
        f"Template did not terminate after {MAX_TEMPLATE_SUBSTITUTIONS} substitutions"
    )
