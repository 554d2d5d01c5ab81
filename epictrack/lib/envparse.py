"""
Env file parser for tracker configuration.

Reads KEY=value lines without any shell evaluation. Values that look like
shell substitutions are refused so a config file can never be mistaken for
a script.
"""

import re
from pathlib import Path

UNSAFE_VALUE_PATTERNS = [
    r'`',           # backticks
    r'\$\(',        # command substitution
    r'\$\{',        # variable expansion
    r';',           # command chaining
    r'\|',          # pipes and OR chaining
    r'&&',          # AND chaining
]

KEY_PATTERN = re.compile(r'^[A-Z][A-Z0-9_]*$')


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def parse_env(text: str) -> dict[str, str]:
    """
    Parse env-file text into a dict.

    Blank lines and lines starting with '#' are ignored. A leading
    ``export`` keyword is accepted and dropped.

    Raises:
        ValueError: on a line without '=', an invalid key, or an unsafe value
    """
    result: dict[str, str] = {}

    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue

        if line.startswith('export '):
            line = line[len('export '):].lstrip()

        if '=' not in line:
            raise ValueError(f"Line {lineno}: expected KEY=value")

        key, _, value = line.partition('=')
        key = key.strip()
        value = _unquote(value.strip())

        if not KEY_PATTERN.match(key):
            raise ValueError(f"Line {lineno}: invalid key '{key}'")

        for pattern in UNSAFE_VALUE_PATTERNS:
            if re.search(pattern, value):
                raise ValueError(f"Line {lineno}: unsafe value for {key}")

        result[key] = value

    return result


def load_env(filepath: str | Path) -> dict[str, str]:
    """
    Read and parse an env file.

    Raises:
        FileNotFoundError: if the file doesn't exist
        ValueError: if the content is invalid (see parse_env)
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Env file not found: {filepath}")
    return parse_env(path.read_text(encoding="utf-8"))
