"""
Relational storage for users, chirps and refresh tokens.

The auth core only depends on the ``Store`` protocol; ``SQLStore`` is the
SQLModel implementation bound to one request-scoped session.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from typing import Protocol
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from chirpy.core.errors import ChirpyError, EmailTaken, StorageError
from chirpy.models.base import as_utc, utcnow
from chirpy.models.chirp import Chirp
from chirpy.models.refresh_token import RefreshToken
from chirpy.models.user import User

logger = logging.getLogger(__name__)


class Store(Protocol):
    def find_user_by_email(self, email: str) -> User | None: ...

    def get_user(self, user_id: UUID) -> User | None: ...

    def create_user(self, email: str, hashed_password: str) -> User: ...

    def update_user_credentials(self, user_id: UUID, email: str, hashed_password: str) -> User | None: ...

    def upgrade_user(self, user_id: UUID) -> User | None: ...

    def delete_users(self) -> None: ...

    def create_refresh_token(self, token: str, user_id: UUID, expires_at: datetime) -> RefreshToken: ...

    def get_refresh_token(self, token: str) -> RefreshToken | None: ...

    def find_user_by_valid_refresh_token(self, token: str, now: datetime) -> User | None: ...

    def revoke_refresh_token(self, token: str, revoked_at: datetime) -> RefreshToken | None: ...

    def create_chirp(self, body: str, user_id: UUID) -> Chirp: ...

    def list_chirps(self, author_id: UUID | None = None, descending: bool = False) -> Sequence[Chirp]: ...

    def get_chirp(self, chirp_id: UUID) -> Chirp | None: ...

    def get_chirp_owner(self, chirp_id: UUID) -> UUID | None: ...

    def delete_chirp(self, chirp_id: UUID) -> None: ...


class SQLStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    @contextmanager
    def _writing(self, on_conflict: type[ChirpyError] = StorageError) -> Iterator[None]:
        try:
            yield
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("Store write rejected by a constraint")
            raise on_conflict() from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Store write failed: %s", e.__class__.__name__)
            raise StorageError() from e

    @contextmanager
    def _reading(self) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error("Store read failed: %s", e.__class__.__name__)
            raise StorageError() from e

    def _reload(self, row: object) -> None:
        with self._reading():
            self.session.refresh(row)

    # users

    def find_user_by_email(self, email: str) -> User | None:
        with self._reading():
            return self.session.exec(select(User).where(User.email == email)).first()

    def get_user(self, user_id: UUID) -> User | None:
        with self._reading():
            return self.session.get(User, user_id)

    def create_user(self, email: str, hashed_password: str) -> User:
        user = User(email=email, hashed_password=hashed_password)
        with self._writing(on_conflict=EmailTaken):
            self.session.add(user)
        self._reload(user)
        return user

    def update_user_credentials(self, user_id: UUID, email: str, hashed_password: str) -> User | None:
        user = self.get_user(user_id)
        if user is None:
            return None
        with self._writing(on_conflict=EmailTaken):
            user.email = email
            user.hashed_password = hashed_password
            user.updated_at = utcnow()
            self.session.add(user)
        self._reload(user)
        return user

    def upgrade_user(self, user_id: UUID) -> User | None:
        user = self.get_user(user_id)
        if user is None:
            return None
        with self._writing():
            user.is_chirpy_red = True
            user.updated_at = utcnow()
            self.session.add(user)
        self._reload(user)
        return user

    def delete_users(self) -> None:
        with self._writing():
            # children first; the tables carry no ORM relationships to order by
            for model in (RefreshToken, Chirp, User):
                for row in self.session.exec(select(model)).all():
                    self.session.delete(row)
                self.session.flush()

    # refresh tokens

    def create_refresh_token(self, token: str, user_id: UUID, expires_at: datetime) -> RefreshToken:
        refresh_token = RefreshToken(token=token, user_id=user_id, expires_at=as_utc(expires_at))
        with self._writing():
            self.session.add(refresh_token)
        self._reload(refresh_token)
        return refresh_token

    def get_refresh_token(self, token: str) -> RefreshToken | None:
        with self._reading():
            return self.session.get(RefreshToken, token)

    def find_user_by_valid_refresh_token(self, token: str, now: datetime) -> User | None:
        statement = (
            select(User)
            .join(RefreshToken, col(RefreshToken.user_id) == col(User.id))
            .where(RefreshToken.token == token)
            .where(col(RefreshToken.revoked_at).is_(None))
            .where(RefreshToken.expires_at > as_utc(now))
        )
        with self._reading():
            return self.session.exec(statement).first()

    def revoke_refresh_token(self, token: str, revoked_at: datetime) -> RefreshToken | None:
        refresh_token = self.get_refresh_token(token)
        if refresh_token is None:
            return None
        if refresh_token.revoked_at is None:
            with self._writing():
                refresh_token.revoked_at = as_utc(revoked_at)
                refresh_token.updated_at = as_utc(revoked_at)
                self.session.add(refresh_token)
            self._reload(refresh_token)
        return refresh_token

    # chirps

    def create_chirp(self, body: str, user_id: UUID) -> Chirp:
        chirp = Chirp(body=body, user_id=user_id)
        with self._writing():
            self.session.add(chirp)
        self._reload(chirp)
        return chirp

    def list_chirps(self, author_id: UUID | None = None, descending: bool = False) -> Sequence[Chirp]:
        statement = select(Chirp)
        if author_id is not None:
            statement = statement.where(Chirp.user_id == author_id)
        order = col(Chirp.created_at).desc() if descending else col(Chirp.created_at).asc()
        with self._reading():
            return self.session.exec(statement.order_by(order)).all()

    def get_chirp(self, chirp_id: UUID) -> Chirp | None:
        with self._reading():
            return self.session.get(Chirp, chirp_id)

    def get_chirp_owner(self, chirp_id: UUID) -> UUID | None:
        chirp = self.get_chirp(chirp_id)
        return chirp.user_id if chirp is not None else None

    def delete_chirp(self, chirp_id: UUID) -> None:
        chirp = self.get_chirp(chirp_id)
        if chirp is None:
            return
        with self._writing():
            self.session.delete(chirp)
