from typing import Optional

from sqlmodel import Session, select

from sniper.db.models import LicenseRecord


def get_license(session: Session, key: str) -> Optional[LicenseRecord]:
    return session.get(LicenseRecord, key)


def save_license(session: Session, record: LicenseRecord) -> LicenseRecord:
    merged = session.merge(record)
    session.commit()
    return merged


def list_licenses(session: Session) -> list[LicenseRecord]:
    return list(session.exec(select(LicenseRecord).order_by(LicenseRecord.key)).all())
