# lawhelper/services/account_service.py

from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lawhelper.core.logger import logger
from lawhelper.core.security import get_password_hash, verify_password
from lawhelper.db.models import User
from lawhelper.utils.exceptions import DuplicateEmailError


def mask_email(email: str) -> str:
    value = (email or "").strip()
    if "@" not in value:
        return "****"
    local, domain = value.split("@", 1)
    if len(local) <= 2:
        local_masked = "*" * len(local)
    else:
        local_masked = local[:2] + ("*" * (len(local) - 2))
    return f"{local_masked}@{domain}"


class AccountService:
    """
    Credential store: account creation, lookup and password verification.
    """

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_by_id(db: Session, user_id: UUID) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def create_account(db: Session, name: str, email: str, password: str) -> User:
        """
        Create an account with a freshly salted password hash.
        Raises DuplicateEmailError if the email is taken.
        """
        if AccountService.get_by_email(db, email) is not None:
            raise DuplicateEmailError(email)

        user = User(name=name.strip(), email=email, password_hash=get_password_hash(password))
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except IntegrityError:
            # concurrent registration with the same email
            db.rollback()
            raise DuplicateEmailError(email)
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create account: {str(e)}")
            raise

        logger.info("account_created user=%s email=%s", user.id, mask_email(email))
        return user

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> Optional[User]:
        """
        Return the account when the password matches, otherwise None.
        Missing accounts and wrong passwords are indistinguishable to the caller
        and in the log.
        """
        user = AccountService.get_by_email(db, email)
        stored_hash = user.password_hash if user is not None else None
        if not verify_password(password, stored_hash):
            logger.info("login_failed email=%s", mask_email(email))
            return None
        return user
