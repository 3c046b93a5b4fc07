"""Upload intake checks shared by documents and context uploads."""

from typing import Iterable

from rfi_responder.core.exceptions import UploadRejectedError


def validate_upload(
    filename: str,
    mime_type: str,
    size: int,
    allowed_mime_types: Iterable[str],
    max_upload_bytes: int,
) -> None:
    """Reject files outside the MIME allow-list or over the size ceiling.

    Raises:
        UploadRejectedError: ``too_large`` is set for size violations
    """
    if mime_type not in set(allowed_mime_types):
        raise UploadRejectedError(
            f"Unsupported file type for {filename}: {mime_type}. "
            "Only Word, Excel and PDF documents are allowed."
        )
    if size > max_upload_bytes:
        raise UploadRejectedError(
            f"{filename} is {size} bytes, exceeding the {max_upload_bytes} byte limit",
            too_large=True,
        )
    if size == 0:
        raise UploadRejectedError(f"{filename} is empty")
