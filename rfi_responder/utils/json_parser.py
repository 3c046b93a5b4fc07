import json
from typing import Any, List, Optional

from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code block (```json ... ```)."""
    cleaned_text = text.strip()
    if cleaned_text.startswith("```json"):
        cleaned_text = cleaned_text[7:]
    elif cleaned_text.startswith("```"):
        cleaned_text = cleaned_text[3:]

    if cleaned_text.endswith("```"):
        cleaned_text = cleaned_text[:-3]

    return cleaned_text.strip()


def parse_json_array(text: str) -> Optional[List[Any]]:
    """Parse a JSON array from LLM output.

    Handles:
    - Markdown code blocks (```json ... ```)
    - Leading/trailing prose around the array

    The whole (cleaned) text is parsed first. If that fails or does not yield
    an array, the first well-formed array starting at any ``[`` is used.

    Args:
        text: Raw model output

    Returns:
        Parsed list, or None if no array could be recovered
    """
    if not text:
        return None

    cleaned_text = strip_code_fences(text)

    try:
        parsed = json.loads(cleaned_text)
        if isinstance(parsed, list):
            return parsed
        LOGGER.debug(f"Top-level JSON is {type(parsed).__name__}, searching for an array")
    except json.JSONDecodeError as e:
        LOGGER.debug(f"Direct JSON parse failed: {e}, searching for an array substring")

    decoder = json.JSONDecoder()
    idx = cleaned_text.find("[")
    while idx != -1:
        try:
            obj, _ = decoder.raw_decode(cleaned_text, idx)
            if isinstance(obj, list):
                return obj
        except json.JSONDecodeError:
            pass
        idx = cleaned_text.find("[", idx + 1)

    return None
