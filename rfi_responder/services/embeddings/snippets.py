import re
from typing import List

# Sentence end followed by whitespace, or a blank line
_SNIPPET_BOUNDARY = re.compile(r"(?<=[.!?])\s+|\n\s*\n")


def split_into_snippets(content: str) -> List[str]:
    """Split text into sentence-like snippets.

    Terminal punctuation is kept so question snippets still end with ``?``.
    Decimal numbers such as ``2.5`` are not split because a boundary needs
    whitespace after the punctuation.
    """
    if not content:
        return []
    return [part.strip() for part in _SNIPPET_BOUNDARY.split(content) if part and part.strip()]


def is_question_snippet(snippet: str) -> bool:
    return snippet.rstrip().endswith("?")
