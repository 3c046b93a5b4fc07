"""Document processing pipeline."""

from rfi_responder.services.pipeline.dispatcher import PipelineDispatcher
from rfi_responder.services.pipeline.orchestrator import DocumentPipeline, user_message
from rfi_responder.services.pipeline.status_store import ProcessingStatusStore

__all__ = ["DocumentPipeline", "PipelineDispatcher", "ProcessingStatusStore", "user_message"]
