from fastapi import APIRouter

from app.modules.admissions import router as admissions_router
from app.modules.application_documents import router as application_documents_router

api_router = APIRouter()

api_router.include_router(admissions_router, prefix="/admissions", tags=["Admissions"])

api_router.include_router(
    application_documents_router,
    prefix="/application-documents",
    tags=["Application Documents"],
)
