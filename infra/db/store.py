from __future__ import annotations

import json
import logging
from typing import Any, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.exceptions import DomainError
from core.interfaces import KeyValueStore
from infra.db.models import StorageItemORM

logger = logging.getLogger(__name__)


class SqlAlchemyKeyValueStore(KeyValueStore):
    """
    JSON values keyed by name in the ``storage_items`` table.

    Writes go through the session; committing is left to the caller, as
    with every other repository.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_item(self, key: str) -> Any:
        obj = self.session.get(StorageItemORM, key)
        if obj is None:
            return None
        try:
            return json.loads(obj.payload)
        except json.JSONDecodeError as e:
            logger.error("Stored value for %s is not valid JSON: %s", key, e)
            raise DomainError(f"Stored value for {key} is corrupt.", code="STORAGE_CORRUPT") from e

    def set_item(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        obj = self.session.get(StorageItemORM, key)
        if obj is None:
            self.session.add(StorageItemORM(key=key, payload=payload))
        else:
            obj.payload = payload
        self.session.flush()

    def remove_item(self, key: str) -> None:
        obj = self.session.get(StorageItemORM, key)
        if obj is not None:
            self.session.delete(obj)
            self.session.flush()

    def keys(self) -> List[str]:
        stmt = select(StorageItemORM.key).order_by(StorageItemORM.key)
        return list(self.session.execute(stmt).scalars().all())


__all__ = ["SqlAlchemyKeyValueStore"]
