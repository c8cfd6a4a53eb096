# backend/lawhelper/db/__init__.py

"""
Database Module

Contains SQLAlchemy models, Pydantic schemas, and database configuration.
"""

from lawhelper.db.database import Base, engine, SessionLocal, get_db
from lawhelper.db import models, schemas

__all__ = [
    'Base',
    'engine',
    'SessionLocal',
    'get_db',
    'models',
    'schemas'
]
