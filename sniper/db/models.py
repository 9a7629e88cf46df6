from datetime import date
from enum import Enum

from sqlmodel import SQLModel, Field


class LicenseKind(str, Enum):
    ADMIN = "ADMIN"
    TRIAL = "TRIAL"
    PAID = "PAID"


class LicenseRecord(SQLModel, table=True):
    key: str = Field(primary_key=True)
    kind: LicenseKind = Field(index=True)
    active: bool = True
    bound_device: str | None = None  # set once on first allowed use
    hands_remaining: int | None = None  # TRIAL only
    expires_on: date | None = None  # PAID only
    note: str | None = None
