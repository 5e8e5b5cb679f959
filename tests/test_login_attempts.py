"""로그인 시도 추적 테스트. 시계를 주입하여 시간 경과를 재현합니다."""

from datetime import datetime, timedelta, timezone

from app.utils.login_attempts import LOCKOUT_DURATION, MAX_FAILED_ATTEMPTS, LoginAttemptRegistry


class FakeClock:
    def __init__(self):
        self.now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class TestLoginAttemptRegistry:
    def test_locks_after_max_failures(self):
        registry = LoginAttemptRegistry(clock=FakeClock())
        for _ in range(MAX_FAILED_ATTEMPTS - 1):
            registry.record_failure("max@example.com")
        assert not registry.is_locked("max@example.com")

        registry.record_failure("max@example.com")
        assert registry.is_locked("MAX@Example.com ")

    def test_lock_expires(self):
        clock = FakeClock()
        registry = LoginAttemptRegistry(clock=clock)
        for _ in range(MAX_FAILED_ATTEMPTS):
            registry.record_failure("max@example.com")

        clock.advance(LOCKOUT_DURATION - timedelta(seconds=1))
        assert registry.is_locked("max@example.com")

        clock.advance(timedelta(seconds=2))
        assert not registry.is_locked("max@example.com")
        # 잠금 해제 후 카운터 초기화
        assert registry.get("max@example.com").failed_attempts == 0

    def test_reset(self):
        registry = LoginAttemptRegistry(clock=FakeClock())
        registry.record_failure("max@example.com")
        registry.reset("max@example.com")
        assert registry.get("max@example.com") is None
        assert len(registry) == 0

    def test_emails_are_independent(self):
        registry = LoginAttemptRegistry(clock=FakeClock())
        for _ in range(MAX_FAILED_ATTEMPTS):
            registry.record_failure("max@example.com")
        assert not registry.is_locked("erika@example.com")

    def test_prune_stale_entries(self):
        clock = FakeClock()
        registry = LoginAttemptRegistry(clock=clock)
        registry.record_failure("alt@example.com")
        clock.advance(timedelta(hours=25))
        registry.record_failure("neu@example.com")

        assert registry.prune() == 1
        assert registry.get("alt@example.com") is None
        assert registry.get("neu@example.com") is not None
