from datetime import datetime, timezone

import pytest

from tiercache.domain.models.expiration import (
    DISTANT_FUTURE,
    SECONDS_PER_DAY,
    Expiration,
    ExpirationKind,
)

NOW = 1_700_000_000.0


def test_never_resolves_to_distant_future():
    assert Expiration.never().resolve(NOW) == DISTANT_FUTURE
    assert DISTANT_FUTURE > datetime(3000, 1, 1, tzinfo=timezone.utc).timestamp()


def test_seconds_are_relative_to_now():
    assert Expiration.seconds(30).resolve(NOW) == NOW + 30


@pytest.mark.parametrize("policy, seconds", [
    (Expiration.minutes(2), 120),
    (Expiration.hours(1), 3600),
    (Expiration.days(1), SECONDS_PER_DAY),
    (Expiration.months(1), 30 * 24 * 3600),
])
def test_named_multiples(policy: Expiration, seconds: float):
    assert policy.kind is ExpirationKind.SECONDS
    assert policy.resolve(NOW) == NOW + seconds


def test_absolute_timestamp_ignores_now():
    assert Expiration.at(NOW + 5).resolve(0) == NOW + 5


def test_absolute_datetime():
    point = datetime(2030, 1, 1, tzinfo=timezone.utc)
    assert Expiration.at(point).resolve(NOW) == point.timestamp()


def test_negative_duration_is_already_expired():
    assert Expiration.seconds(-1).resolve(NOW) < NOW


def test_policies_are_value_objects():
    assert Expiration.minutes(1) == Expiration.seconds(60)
    assert Expiration.never() == Expiration.never()
