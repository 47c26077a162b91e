"""
Markdown code-fence stripping for oracle output.

The oracle is told to emit bare component code but frequently wraps it in
```tsx ... ``` anyway. Both the opener and the closer are optional.
"""

from __future__ import annotations

import re

_OPENER = re.compile(r"\A```(?:tsx?|jsx?|typescript|javascript)?\s*\n?", re.IGNORECASE)
_CLOSER = re.compile(r"\n?```\s*\Z")


def _strip_once(text: str) -> str:
    text = _OPENER.sub("", text, count=1)
    return _CLOSER.sub("", text, count=1)


def strip_code_fences(raw: str) -> str:
    """
    Remove a leading fence opener and a trailing fence closer.

    Repeats until nothing changes so the result is always a fixed point:
    strip_code_fences(strip_code_fences(t)) == strip_code_fences(t).

    Args:
        raw: Raw (possibly partial) oracle output

    Returns:
        Source text without fence decoration
    """
    text = raw or ""
    while True:
        stripped = _strip_once(text)
        if stripped == text:
            return stripped
        text = stripped
