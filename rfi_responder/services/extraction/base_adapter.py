from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from rfi_responder.services.extraction.models import TextUnit


class FormatAdapter(ABC):
    """Parses one document family from a file on disk.

    ``parse`` is synchronous and is run in a worker thread by the
    ``ContentExtractor``. Library errors are allowed to propagate; the
    extractor wraps them into ``ExtractionError``.
    """

    name: str = "base"

    @abstractmethod
    def parse(self, path: Path, filename: str) -> List[TextUnit]:
        """Return text units in document order."""
        pass
