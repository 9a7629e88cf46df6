"""License record stores.

A store is a plain mapping from key to :class:`LicenseRecord` handed to the
access controller. The controller does its own locking; stores only need
``get``/``save``/``all``.
"""
import json
import logging
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, model_validator

from sniper.db.base import make_engine, init_db, session_scope
from sniper.db.crud import get_license, save_license, list_licenses
from sniper.db.models import LicenseKind, LicenseRecord

logger = logging.getLogger(__name__)


class LicenseStore:
    def get(self, key: str) -> Optional[LicenseRecord]:
        raise NotImplementedError

    def save(self, record: LicenseRecord) -> None:
        raise NotImplementedError

    def all(self) -> list[LicenseRecord]:
        raise NotImplementedError

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class MemoryLicenseStore(LicenseStore):
    def __init__(self, records: Iterable[LicenseRecord] = ()):
        self._records: dict[str, LicenseRecord] = {}
        for r in records:
            self.save(r)

    def get(self, key):
        return self._records.get(key)

    def save(self, record):
        self._records[record.key] = record

    def all(self):
        return [self._records[k] for k in sorted(self._records)]


class SqlLicenseStore(LicenseStore):
    def __init__(self, engine=None, dsn: str = "sqlite://"):
        self.engine = engine if engine is not None else make_engine(dsn)
        init_db(self.engine)

    def get(self, key):
        with session_scope(self.engine) as session:
            return get_license(session, key)

    def save(self, record):
        with session_scope(self.engine) as session:
            save_license(session, record)

    def all(self):
        with session_scope(self.engine) as session:
            return list_licenses(session)


class LicenseSeed(BaseModel):
    key: str
    kind: LicenseKind
    active: bool = True
    bound_device: Optional[str] = None
    hands_remaining: Optional[int] = None
    expires_on: Optional[date] = None
    note: Optional[str] = None

    @model_validator(mode="after")
    def _kind_fields(self):
        if self.kind is LicenseKind.TRIAL and self.hands_remaining is None:
            raise ValueError(f"trial key {self.key!r} needs hands_remaining")
        if self.kind is LicenseKind.PAID and self.expires_on is None:
            raise ValueError(f"paid key {self.key!r} needs expires_on")
        return self

    def to_record(self) -> LicenseRecord:
        return LicenseRecord(**self.model_dump())


def load_license_file(path: str | Path) -> list[LicenseRecord]:
    """Read the hand-edited license table.

    The file is either a JSON list of license objects or ``{"licenses": [...]}``.
    A missing file gives an empty table; a malformed one raises.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("license file %s not found, starting with no keys", path)
        return []
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("licenses", [])
    return [LicenseSeed.model_validate(item).to_record() for item in data]


def seed_store(store: LicenseStore, records: Iterable[LicenseRecord]) -> int:
    n = 0
    for r in records:
        store.save(r)
        n += 1
    logger.info("seeded %d license record(s)", n)
    return n


def build_store(kind: str = "memory", dsn: str = "sqlite://") -> LicenseStore:
    if kind == "sql":
        return SqlLicenseStore(dsn=dsn)
    return MemoryLicenseStore()
