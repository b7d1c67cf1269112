from datetime import timedelta

from coachbot.db.models import UserRecord, UserStatus
from coachbot.services.limits import Admission, admit, consume, has_quota
from conftest import START


def test_has_quota_and_consume():
    unlimited = UserRecord(identity="a")
    one = UserRecord(identity="b", quota=1)

    assert has_quota(unlimited)
    consume(unlimited)
    assert unlimited.quota is None

    assert has_quota(one)
    consume(one)
    assert one.quota == 0
    assert not has_quota(one)
    assert not has_quota(UserRecord(identity="c", quota=-2))


def test_quota_of_one_admits_exactly_once():
    u = UserRecord(identity="a", status=UserStatus.PAID, expire_at=START + timedelta(days=3), quota=1)

    assert admit(u, START) == Admission.ALLOWED
    assert u.quota == 0
    assert u.status == UserStatus.PAID

    assert admit(u, START) == Admission.QUOTA_EXHAUSTED
    assert u.quota == 0


def test_expired_is_reported_once_then_inactive():
    u = UserRecord(identity="a", status=UserStatus.PAID, expire_at=START - timedelta(seconds=1), quota=5)

    assert admit(u, START) == Admission.EXPIRED
    assert admit(u, START) == Admission.INACTIVE
    assert u.quota == 5


def test_unset_user_is_inactive():
    assert admit(UserRecord(identity="a", quota=3), START) == Admission.INACTIVE
