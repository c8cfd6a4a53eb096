# lawhelper/services/ownership.py
"""
Owner scoping shared by every persistence service.

All owned tables carry ``user_id``; records are fetched with the owner in the
WHERE clause so a guessed id belonging to someone else behaves exactly like an
id that does not exist.
"""
from typing import Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy.orm import Query, Session

from lawhelper.db.database import Base

ModelT = TypeVar("ModelT", bound=Base)


def owned_query(db: Session, model: Type[ModelT], owner_id: UUID) -> Query:
    """Base query over ``model`` restricted to rows owned by ``owner_id``."""
    return db.query(model).filter(model.user_id == owner_id)


def get_owned(db: Session, model: Type[ModelT], record_id: UUID, owner_id: UUID) -> Optional[ModelT]:
    """Fetch one row by id, or None when it is missing or owned by another account."""
    return owned_query(db, model, owner_id).filter(model.id == record_id).first()
