# lawhelper/services/document_service.py

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from lawhelper.core.logger import logger
from lawhelper.db.models import SavedDocument
from lawhelper.services.ownership import get_owned, owned_query


class DocumentService:
    """
    Service layer for saved documents.
    """

    @staticmethod
    def create_document(db: Session, user_id: UUID, doc_data: Dict[str, Any]) -> SavedDocument:
        """
        Create a new saved document owned by ``user_id``.
        """
        try:
            document = SavedDocument(user_id=user_id, **doc_data)
            db.add(document)
            db.commit()
            db.refresh(document)

            logger.info(f"Document saved: {document.title} ({document.id})")
            return document

        except Exception as e:
            db.rollback()
            logger.error(f"Failed to save document: {str(e)}")
            raise

    @staticmethod
    def get_document(db: Session, user_id: UUID, document_id: UUID) -> Optional[SavedDocument]:
        return get_owned(db, SavedDocument, document_id, user_id)

    @staticmethod
    def list_documents(
        db: Session,
        user_id: UUID,
        case_id: Optional[UUID] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[SavedDocument]:
        """
        The owner's documents, newest first, optionally narrowed to one case.
        """
        query = owned_query(db, SavedDocument, user_id)
        if case_id is not None:
            query = query.filter(SavedDocument.case_id == case_id)
        return query.order_by(SavedDocument.created_at.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def delete_document(db: Session, document: SavedDocument) -> None:
        document_id = document.id
        try:
            db.delete(document)
            db.commit()
            logger.info(f"Document deleted: {document_id}")
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to delete document {document_id}: {str(e)}")
            raise
