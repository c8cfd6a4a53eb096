# lawhelper/services/case_service.py

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from lawhelper.core.logger import logger
from lawhelper.db.models import Case, CaseStatus
from lawhelper.services.ownership import get_owned, owned_query

_REQUIRED_FIELDS = {"case_name", "client_name", "case_type", "status"}


class CaseService:
    """
    Service layer for case management. Every read and write is scoped to the owner.
    """

    @staticmethod
    def create_case(db: Session, user_id: UUID, case_data: Dict[str, Any]) -> Case:
        """
        Create a new case owned by ``user_id``.
        """
        try:
            data = {k: v for k, v in case_data.items() if v is not None}
            case = Case(user_id=user_id, **data)
            if case.status is None:
                case.status = CaseStatus.active
            db.add(case)
            db.commit()
            db.refresh(case)

            logger.info(f"Case created: {case.case_name} ({case.id})")
            return case

        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create case: {str(e)}")
            raise

    @staticmethod
    def get_case(db: Session, user_id: UUID, case_id: UUID) -> Optional[Case]:
        return get_owned(db, Case, case_id, user_id)

    @staticmethod
    def list_cases(db: Session, user_id: UUID, status: Optional[CaseStatus] = None) -> List[Case]:
        """
        The owner's cases, newest first.
        """
        query = owned_query(db, Case, user_id)
        if status is not None:
            query = query.filter(Case.status == status)
        return query.order_by(Case.created_at.desc()).all()

    @staticmethod
    def update_case(db: Session, case: Case, update_data: Dict[str, Any]) -> Case:
        """
        Apply a partial update. Raises ValueError when the resulting value range is inverted.
        """
        low = update_data.get("value_low", case.value_low)
        high = update_data.get("value_high", case.value_high)
        if low is not None and high is not None and low > high:
            raise ValueError("valueLow must not exceed valueHigh")

        try:
            for key, value in update_data.items():
                if value is None and key in _REQUIRED_FIELDS:
                    continue
                if hasattr(case, key):
                    setattr(case, key, value)

            if update_data.get("status") == CaseStatus.closed and case.date_closed is None:
                case.date_closed = datetime.utcnow()

            case.updated_at = datetime.utcnow()
            db.commit()
            db.refresh(case)

            logger.info(f"Case updated: {case.id}")
            return case

        except Exception as e:
            db.rollback()
            logger.error(f"Failed to update case: {str(e)}")
            raise

    @staticmethod
    def delete_case(db: Session, case: Case) -> None:
        """
        Delete a case. Its medical records go with it; saved documents are detached.
        """
        case_id = case.id
        try:
            db.delete(case)
            db.commit()
            logger.info(f"Case deleted: {case_id}")
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to delete case {case_id}: {str(e)}")
            raise
