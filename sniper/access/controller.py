"""License checks for prediction calls.

The controller is the only writer of a record's ``bound_device`` and
``hands_remaining``. The whole read-decide-write sequence for a call runs under
one lock, so two requests on the same key can neither both spend the last
trial hand nor bind two different devices.
"""
import logging
import math
import threading
from dataclasses import dataclass
from datetime import datetime, date, time, timedelta
from enum import Enum
from typing import Callable, Optional

from sniper.access.store import LicenseStore
from sniper.db.models import LicenseKind, LicenseRecord

logger = logging.getLogger(__name__)


class DenialCode(str, Enum):
    INVALID_KEY = "invalid or blocked key"
    DEVICE_MISMATCH = "locked to another device"
    NO_DEVICE = "device id required"
    TRIAL_ENDED = "trial ended"
    EXPIRED = "subscription expired"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    message: str
    code: Optional[DenialCode] = None

    @classmethod
    def allow(cls, message: str) -> "Decision":
        return cls(True, message)

    @classmethod
    def deny(cls, code: DenialCode) -> "Decision":
        return cls(False, code.value, code)


class AccessDenied(Exception):
    def __init__(self, decision: Decision):
        super().__init__(decision.message)
        self.decision = decision


def days_left(expires_on: date, now: datetime) -> int:
    # a key is good through the whole of its expiry day
    end = datetime.combine(expires_on + timedelta(days=1), time.min)
    return max(0, math.ceil((end - now).total_seconds() / 86400))


class AccessController:
    def __init__(self, store: LicenseStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock
        self._lock = threading.RLock()

    def check_and_charge(self, key: str, device_id: str) -> Decision:
        return self.check_access(key, device_id, chargeable=True)

    def verify_only(self, key: str, device_id: str) -> Decision:
        return self.check_access(key, device_id, chargeable=False)

    def check_access(self, key: str, device_id: str, chargeable: bool) -> Decision:
        with self._lock:
            record = self.store.get(key)
            decision, bind, charge = self._decide(record, device_id, chargeable)
            if decision.allowed and (bind or charge):
                if bind:
                    record.bound_device = device_id
                    logger.info("key %s bound to device %s", _mask(key), device_id)
                if charge:
                    record.hands_remaining -= 1
                self.store.save(record)
        if not decision.allowed:
            logger.warning("denied key %s on device %s: %s", _mask(key), device_id, decision.message)
        return decision

    def reset_device(self, key: str) -> bool:
        with self._lock:
            record = self.store.get(key)
            if record is None:
                return False
            record.bound_device = None
            self.store.save(record)
        logger.info("device binding cleared for key %s", _mask(key))
        return True

    def _decide(self, record: Optional[LicenseRecord], device_id: str, chargeable: bool):
        """Return ``(decision, bind, charge)`` without touching the record."""
        if record is None or not record.active:
            return Decision.deny(DenialCode.INVALID_KEY), False, False
        if record.kind == LicenseKind.ADMIN:
            return Decision.allow("admin"), False, False

        if not device_id:
            return Decision.deny(DenialCode.NO_DEVICE), False, False
        bind = record.bound_device is None
        if not bind and record.bound_device != device_id:
            return Decision.deny(DenialCode.DEVICE_MISMATCH), False, False

        if record.kind == LicenseKind.TRIAL:
            hands = record.hands_remaining or 0
            if hands <= 0:
                return Decision.deny(DenialCode.TRIAL_ENDED), False, False
            left = hands - 1 if chargeable else hands
            return Decision.allow(f"trial: {left} hands left"), bind, chargeable

        if record.kind == LicenseKind.PAID:
            now = self.clock()
            if record.expires_on is None or now.date() > record.expires_on:
                return Decision.deny(DenialCode.EXPIRED), False, False
            return Decision.allow(f"{days_left(record.expires_on, now)} days left"), bind, False

        return Decision.deny(DenialCode.INVALID_KEY), False, False


def _mask(key: str) -> str:
    return key[:4] + "***" if len(key) > 4 else "***"
