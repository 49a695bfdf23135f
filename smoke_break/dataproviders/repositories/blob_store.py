"""SQLAlchemy storage of keyed JSON blobs."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import scoped_session

from smoke_break.core.errors import PersistenceError
from smoke_break.dataproviders.db import session_scope
from smoke_break.dataproviders.repositories._models import BlobModel


class SqlAlchemyBlobStore:
    def __init__(self, session_factory: scoped_session | None = None) -> None:
        self._session_factory = session_factory

    def read(self, key: str) -> str | None:
        try:
            with session_scope(self._session_factory) as session:
                model = session.get(BlobModel, key)
                return model.payload if model else None
        except SQLAlchemyError as exc:
            raise PersistenceError(f"reading {key!r} failed: {exc}") from exc

    def write(self, key: str, payload: str) -> None:
        try:
            with session_scope(self._session_factory) as session:
                model = session.get(BlobModel, key)
                if model is None:
                    session.add(BlobModel(key=key, payload=payload))
                else:
                    model.payload = payload
        except SQLAlchemyError as exc:
            raise PersistenceError(f"writing {key!r} failed: {exc}") from exc
