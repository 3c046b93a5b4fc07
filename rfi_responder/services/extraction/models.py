"""Data models for content extraction."""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class TextUnit:
    """One logical page, sheet or section of normalized text.

    Attributes:
        text: Plain text content
        label: Citation label (e.g. "rfi.xlsx - Sheet: Pricing")
        metadata: Format specific details (page number, sheet name, ...)
    """

    text: str
    label: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.text)
