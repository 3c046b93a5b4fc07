from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    status: str = Field(default="healthy", examples=["healthy", "degraded"])
    version: str = Field(..., examples=["0.1.0"])
    service: str = Field(..., examples=["RFI Responder"])
