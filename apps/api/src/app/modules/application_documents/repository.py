"""
Application Documents Repository

Database operations for supporting document metadata.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import ApplicationDocument


async def create(
    db: AsyncSession,
    *,
    application_id: int,
    file_name: str,
    original_name: str,
    file_path: str,
    file_type: str,
    file_size: int,
    document_type: str,
) -> ApplicationDocument:
    """Create a document record."""
    document = ApplicationDocument(
        application_id=application_id,
        file_name=file_name,
        original_name=original_name,
        file_path=file_path,
        file_type=file_type,
        file_size=file_size,
        document_type=document_type,
    )

    db.add(document)
    await db.commit()
    await db.refresh(document)

    return document


async def get_by_id(db: AsyncSession, id: int) -> ApplicationDocument | None:
    """Get document by ID."""
    return await db.get(ApplicationDocument, id)


async def list_for_application(db: AsyncSession, application_id: int) -> list[ApplicationDocument]:
    """All documents for an application, oldest upload first."""
    result = await db.execute(
        select(ApplicationDocument)
        .where(ApplicationDocument.application_id == application_id)
        .order_by(ApplicationDocument.uploaded_at.asc(), ApplicationDocument.id.asc())
    )
    return list(result.scalars().all())


async def delete(db: AsyncSession, document: ApplicationDocument) -> None:
    """Delete a document record."""
    await db.delete(document)
    await db.commit()
