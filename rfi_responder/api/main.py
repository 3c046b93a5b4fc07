from fastapi import APIRouter

from rfi_responder.api.routes import contexts, documents, health, processing, questions

api_router = APIRouter()

api_router.include_router(documents.router, prefix="/documents", tags=["Documents"])
api_router.include_router(processing.router, prefix="/processing", tags=["Processing"])
api_router.include_router(questions.router, prefix="/questions", tags=["Questions"])
api_router.include_router(contexts.router, prefix="/contexts", tags=["Contexts"])
api_router.include_router(health.router, prefix="", tags=["Health"])
