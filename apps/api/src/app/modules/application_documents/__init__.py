"""
Application Documents Module

Server side of phase 2 of the admission workflow: typed supporting documents
attached to an existing application and stored on local disk.

API Endpoints:
- GET /application-documents/types - Document type vocabulary
- POST /application-documents/upload - Upload a document (rate limited per IP)
- GET /application-documents/{application_id} - List documents, oldest first
- GET /application-documents/download/{document_id} - Download a document
- DELETE /application-documents/{document_id} - Delete a document
"""

from .router import router

__all__ = ["router"]
