import threading
from datetime import date, datetime

from sniper.access.controller import AccessController, DenialCode, days_left
from sniper.access.store import MemoryLicenseStore
from sniper.db.models import LicenseKind, LicenseRecord

NOW = datetime(2026, 1, 10, 12, 0)


def make(*records):
    store = MemoryLicenseStore(records)
    return AccessController(store, clock=lambda: NOW), store


def trial(key="T1", hands=3, **kw):
    return LicenseRecord(key=key, kind=LicenseKind.TRIAL, hands_remaining=hands, **kw)


def paid(key="P1", expires=date(2026, 1, 20), **kw):
    return LicenseRecord(key=key, kind=LicenseKind.PAID, expires_on=expires, **kw)


def test_unknown_and_blocked_keys():
    ctl, _ = make(trial(active=False))
    assert ctl.check_and_charge("nope", "A").code == DenialCode.INVALID_KEY
    d = ctl.check_and_charge("T1", "A")
    assert not d.allowed
    assert d.message == "invalid or blocked key"


def test_admin_is_never_bound_or_charged():
    ctl, store = make(LicenseRecord(key="ADM", kind=LicenseKind.ADMIN))
    assert ctl.check_and_charge("ADM", "A").message == "admin"
    assert ctl.check_and_charge("ADM", "B").allowed
    assert store.get("ADM").bound_device is None


def test_trial_counts_down_then_ends():
    ctl, store = make(trial(hands=2))
    assert ctl.check_and_charge("T1", "A").message == "trial: 1 hands left"
    assert ctl.verify_only("T1", "A").message == "trial: 1 hands left"
    assert store.get("T1").hands_remaining == 1
    assert ctl.check_and_charge("T1", "A").allowed
    d = ctl.check_and_charge("T1", "A")
    assert d.code == DenialCode.TRIAL_ENDED
    assert store.get("T1").hands_remaining == 0


def test_verify_only_does_not_charge():
    ctl, store = make(trial(hands=1))
    for _ in range(3):
        assert ctl.verify_only("T1", "A").allowed
    assert store.get("T1").hands_remaining == 1


def test_denied_call_does_not_bind():
    ctl, store = make(trial(hands=0))
    assert not ctl.check_and_charge("T1", "A").allowed
    assert store.get("T1").bound_device is None


def test_device_lock_and_reset():
    ctl, store = make(trial(hands=10))
    assert ctl.check_and_charge("T1", "A").allowed
    assert store.get("T1").bound_device == "A"
    d = ctl.check_and_charge("T1", "B")
    assert d.code == DenialCode.DEVICE_MISMATCH
    assert d.message == "locked to another device"
    assert store.get("T1").hands_remaining == 9

    assert ctl.reset_device("T1")
    assert store.get("T1").hands_remaining == 9
    assert ctl.check_and_charge("T1", "B").allowed
    assert store.get("T1").bound_device == "B"
    assert not ctl.check_and_charge("T1", "A").allowed


def test_reset_unknown_key():
    ctl, _ = make()
    assert ctl.reset_device("missing") is False


def test_paid_days_left_and_expiry():
    ctl, _ = make(paid(), paid("P2", date(2026, 1, 10)), paid("P3", date(2026, 1, 9)))
    assert ctl.check_and_charge("P1", "A").message == "11 days left"
    # still valid through the expiry day itself
    assert ctl.check_and_charge("P2", "A").message == "1 days left"
    d = ctl.check_and_charge("P3", "A")
    assert d.code == DenialCode.EXPIRED
    assert d.message == "subscription expired"


def test_days_left_rounds_up():
    assert days_left(date(2026, 1, 10), datetime(2026, 1, 10, 0, 0)) == 1
    assert days_left(date(2026, 1, 11), datetime(2026, 1, 10, 23, 0)) == 2


def test_last_trial_hand_is_spent_once():
    ctl, store = make(trial(hands=1))
    barrier = threading.Barrier(2)
    results = []

    def worker():
        barrier.wait()
        results.append(ctl.check_and_charge("T1", "A"))

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(d.allowed for d in results) == [False, True]
    assert store.get("T1").hands_remaining == 0


def test_concurrent_binding_picks_one_device():
    ctl, store = make(trial(hands=50))
    barrier = threading.Barrier(8)
    results = {}

    def worker(dev):
        barrier.wait()
        results[dev] = ctl.check_and_charge("T1", dev).allowed

    threads = [threading.Thread(target=worker, args=(f"D{i}",)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    winners = [dev for dev, ok in results.items() if ok]
    assert len(winners) == 1
    assert store.get("T1").bound_device == winners[0]
    assert store.get("T1").hands_remaining == 49


def test_empty_device_is_denied_and_not_bound():
    ctl, store = make(trial(hands=2))
    d = ctl.check_and_charge("T1", "")
    assert d.code == DenialCode.NO_DEVICE
    assert store.get("T1").bound_device is None
    assert store.get("T1").hands_remaining == 2
    assert ctl.check_and_charge("T1", "A").allowed
