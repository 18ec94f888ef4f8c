from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import StorageError
from ..models import CachedReport
from ..schemas import ScanResult


logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryStore:
    def __init__(self):
        self.data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqlAlchemyStore:
    """Хранилище поверх таблицы ``cached_reports``."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        try:
            row = self.db.query(CachedReport).filter_by(sha256=key).first()
        except SQLAlchemyError as exc:
            logger.error("   ❌ Ошибка чтения кэша: %s", exc)
            raise StorageError(str(exc)) from exc
        return row.result_json if row else None

    def set(self, key: str, value: str) -> None:
        # merge: при гонке двух проверок выигрывает последняя запись
        try:
            self.db.merge(CachedReport(sha256=key, result_json=value))
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("   ❌ Ошибка записи в кэш: %s", exc)
            raise StorageError(str(exc)) from exc


class ReportCache:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def get(self, fingerprint: str) -> Optional[ScanResult]:
        raw = self.store.get(fingerprint)
        if raw is None:
            return None
        try:
            return ScanResult.model_validate_json(raw)
        except ValidationError as exc:
            logger.error("   ❌ Повреждённая запись кэша для %s", fingerprint)
            raise StorageError(f"corrupted cache entry for {fingerprint}") from exc

    def put(self, fingerprint: str, result: ScanResult) -> None:
        self.store.set(fingerprint, result.model_dump_json())
