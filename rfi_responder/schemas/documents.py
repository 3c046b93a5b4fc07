"""Document schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentResponse(BaseModel):
    """Document record as returned by the API (raw content omitted)."""

    id: int
    name: str
    type: str
    status: str
    metadata: Optional[Dict[str, Any]] = None
    uploaded_at: Optional[datetime] = Field(default=None, serialization_alias="uploadedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_model(cls, document) -> "DocumentResponse":
        return cls(
            id=document.id,
            name=document.name,
            type=document.mime_type,
            status=document.status,
            metadata=document.document_metadata,
            uploaded_at=document.uploaded_at,
        )


class RejectedUpload(BaseModel):
    """File refused at intake."""

    filename: str
    error: str
    too_large: bool = False


class UploadResult(BaseModel):
    """Outcome of a multi-file upload."""

    documents: List[DocumentResponse] = Field(default_factory=list)
    rejected: List[RejectedUpload] = Field(default_factory=list)
