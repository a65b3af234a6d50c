# rvms_api/store.py
"""
Document store over SQLAlchemy.

Every document lives in a logical container and is addressed by its id
within a partition key. Each write stamps a fresh ``_etag``; passing
``if_match`` to :meth:`DocumentStore.upsert_item` turns the write into a
check-and-set against that token.
"""
from __future__ import annotations

import copy
import logging
from typing import Callable
from uuid import uuid4

from sqlalchemy import func, insert, inspect, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .models import Document

logger = logging.getLogger(__name__)

RESERVED_KEYS = ("id", "_etag")


class DocumentStoreError(Exception):
    pass


class ResourceNotFoundError(DocumentStoreError):
    pass


class ResourceExistsError(DocumentStoreError):
    pass


class PreconditionFailedError(DocumentStoreError):
    pass


def _new_etag() -> str:
    return uuid4().hex


def _body(item: dict) -> dict:
    return {k: v for k, v in item.items() if k not in RESERVED_KEYS}


def _to_item(item_id: str, body: dict, etag: str) -> dict:
    item = copy.deepcopy(body)
    item["id"] = item_id
    item["_etag"] = etag
    return item


class DocumentStore:
    def __init__(self, db, container: str):
        self._db = db
        self.container = container

    @property
    def session(self):
        return self._db.session

    def create_container_if_not_exists(self) -> bool:
        """Create the backing table; return True if it did not exist."""
        engine = self._db.engine
        if inspect(engine).has_table(Document.__tablename__):
            return False
        Document.__table__.create(bind=engine, checkfirst=True)
        logger.info("Created document table for container %s", self.container)
        return True

    def read_item(self, item_id: str, partition_key: str) -> dict:
        try:
            row = self.session.get(
                Document,
                (self.container, partition_key, item_id),
                populate_existing=True,
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            raise DocumentStoreError(str(e)) from e
        if row is None:
            raise ResourceNotFoundError(f"Item {item_id} not found in partition {partition_key}")
        return _to_item(row.id, row.body, row.etag)

    def create_item(self, item: dict, partition_key: str) -> dict:
        item_id = item["id"]
        body = _body(item)
        etag = _new_etag()
        stmt = insert(Document).values(
            container=self.container,
            partition_key=partition_key,
            id=item_id,
            body=body,
            etag=etag,
        )
        try:
            self.session.execute(stmt)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ResourceExistsError(f"Item {item_id} already exists") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise DocumentStoreError(str(e)) from e
        return _to_item(item_id, body, etag)

    def upsert_item(self, item: dict, partition_key: str, if_match: str | None = None) -> dict:
        """
        Insert or replace ``item``.

        With ``if_match`` the replace only happens while the stored etag is
        unchanged; otherwise PreconditionFailedError is raised and nothing
        is written.
        """
        item_id = item["id"]
        body = _body(item)
        etag = _new_etag()
        try:
            if if_match is not None:
                stmt = (
                    update(Document)
                    .where(
                        Document.container == self.container,
                        Document.partition_key == partition_key,
                        Document.id == item_id,
                        Document.etag == if_match,
                    )
                    .values(body=body, etag=etag)
                    .execution_options(synchronize_session=False)
                )
                result = self.session.execute(stmt)
                if result.rowcount == 0:
                    self.session.rollback()
                    raise PreconditionFailedError(
                        f"Item {item_id} was modified since etag {if_match}"
                    )
            else:
                row = self.session.get(
                    Document,
                    (self.container, partition_key, item_id),
                    populate_existing=True,
                )
                if row is None:
                    self.session.add(Document(
                        container=self.container,
                        partition_key=partition_key,
                        id=item_id,
                        body=body,
                        etag=etag,
                    ))
                else:
                    row.body = body
                    row.etag = etag
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise DocumentStoreError(str(e)) from e
        return _to_item(item_id, body, etag)

    def modify_item(
        self,
        item_id: str,
        partition_key: str,
        mutate: Callable[[dict], dict],
        max_attempts: int = 5,
    ) -> dict:
        """
        Read-modify-write ``item_id`` with optimistic concurrency.

        ``mutate`` receives a private copy of the current document and
        returns the replacement. A concurrent write between the read and
        the write causes a fresh read and another call to ``mutate``.
        """
        for attempt in range(1, max_attempts + 1):
            current = self.read_item(item_id, partition_key)
            updated = mutate(copy.deepcopy(current))
            try:
                return self.upsert_item(updated, partition_key, if_match=current["_etag"])
            except PreconditionFailedError:
                logger.warning(
                    "Concurrent update of %s (attempt %d/%d)", item_id, attempt, max_attempts
                )
        raise PreconditionFailedError(
            f"Item {item_id} kept changing after {max_attempts} attempts"
        )

    def count_items(self) -> int:
        stmt = select(func.count()).select_from(Document).where(
            Document.container == self.container
        )
        return self.session.execute(stmt).scalar_one()
