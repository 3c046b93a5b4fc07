"""Content extraction services."""

from rfi_responder.services.extraction.content_extractor import ContentExtractor, default_adapters
from rfi_responder.services.extraction.models import TextUnit

__all__ = ["ContentExtractor", "TextUnit", "default_adapters"]
