from datetime import datetime, timedelta, timezone

from paes_app.services import expiry_guard

T0 = datetime(2025, 3, 1, 10, 0, 0)


def test_untimed_attempt_never_expires():
    status = expiry_guard.evaluate(T0, None, None, T0 + timedelta(days=3))
    assert status.expired is False
    assert status.elapsed_seconds == 3 * 86400


def test_expires_exactly_at_limit():
    assert expiry_guard.evaluate(T0, 60, None, T0 + timedelta(seconds=59)).expired is False
    assert expiry_guard.evaluate(T0, 60, None, T0 + timedelta(seconds=60)).expired is True
    assert expiry_guard.evaluate(T0, 60, None, T0 + timedelta(seconds=61)).expired is True


def test_sealed_attempt_is_not_reported_expired():
    status = expiry_guard.evaluate(T0, 60, T0 + timedelta(seconds=30), T0 + timedelta(seconds=600))
    assert status.expired is False
    assert status.elapsed_seconds == 600


def test_elapsed_is_whole_seconds_and_never_negative():
    assert expiry_guard.elapsed_seconds(T0, T0 + timedelta(seconds=10, milliseconds=900)) == 10
    # DB 시계가 잠깐 뒤로 가도 음수가 되지 않는다
    assert expiry_guard.elapsed_seconds(T0, T0 - timedelta(seconds=5)) == 0


def test_naive_and_aware_timestamps_compare_as_utc():
    aware_now = datetime(2025, 3, 1, 10, 1, 0, tzinfo=timezone.utc)
    assert expiry_guard.elapsed_seconds(T0, aware_now) == 60

    santiago = timezone(timedelta(hours=-3))
    started_local = datetime(2025, 3, 1, 7, 0, 0, tzinfo=santiago)
    assert expiry_guard.elapsed_seconds(started_local, aware_now) == 60


def test_evaluate_attempt_reads_model_fields():
    class _Att:
        started_at = T0
        time_limit_seconds = 120
        submitted_at = None

    status = expiry_guard.evaluate_attempt(_Att(), T0 + timedelta(seconds=200))
    assert status.expired is True
    assert status.server_now == T0 + timedelta(seconds=200)
