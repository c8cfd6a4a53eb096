# lawhelper/services/search_history_service.py

from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from lawhelper.core.config import settings
from lawhelper.core.logger import logger
from lawhelper.db.models import SearchHistory
from lawhelper.services.ownership import owned_query


class SearchHistoryService:
    """
    Append-only log of AI tool runs, read back newest first.
    """

    @staticmethod
    def record(db: Session, user_id: UUID, entry_type: str, query: str, results: Any) -> SearchHistory:
        """Append one entry. ``results`` must already be JSON-serializable."""
        try:
            entry = SearchHistory(user_id=user_id, type=entry_type, query=query, results=results)
            db.add(entry)
            db.commit()
            db.refresh(entry)
            logger.info(f"History recorded: {entry_type} for user {user_id}")
            return entry
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to record {entry_type} history: {str(e)}")
            raise

    @staticmethod
    def list_recent(db: Session, user_id: UUID, limit: Optional[int] = None) -> List[SearchHistory]:
        """The owner's most recent entries, newest first."""
        return (
            owned_query(db, SearchHistory, user_id)
            .order_by(SearchHistory.created_at.desc())
            .limit(limit or settings.SEARCH_HISTORY_LIMIT)
            .all()
        )
