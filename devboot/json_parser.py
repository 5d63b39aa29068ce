"""JSON-ish preprocessing for tool configuration files.

``tsconfig.json``, ``.eslintrc.json`` and friends are routinely written with
comments and trailing commas. ``preprocess_jsonish`` turns such text into
strict JSON that ``json.loads`` accepts.

Removed characters are replaced with spaces and newlines are kept, so line
and column numbers in a later ``JSONDecodeError`` still point into the
original text.
"""

import re

_GAP = r'(?:\s|//[^\n]*|/\*.*?\*/)*'

# Strings come first so comment markers inside them are never touched.
_TOKEN = re.compile(
    r'"(?:\\.|[^"\\\n])*"'
    r"|//[^\n]*"
    r"|/\*.*?\*/"
    rf"|,(?={_GAP}[\]}}])",
    re.DOTALL,
)


def _blank(match: re.Match) -> str:
    token = match.group()
    if token.startswith('"'):
        return token
    return re.sub(r"[^\n]", " ", token)


def preprocess_jsonish(text: str) -> str:
    """Strip comments and trailing commas, preserving positions.

    Examples:
        >>> import json
        >>> json.loads(preprocess_jsonish('{"a": 1,}'))
        {'a': 1}

        >>> json.loads(preprocess_jsonish('{"url": "https://x.dev"} // home'))
        {'url': 'https://x.dev'}
    """
    return _TOKEN.sub(_blank, text)


__all__ = ["preprocess_jsonish"]
