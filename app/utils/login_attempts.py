"""로그인 시도 추적 — 메모리 기반 계정 잠금.

In-memory login attempt tracking with timed lockout.
Five consecutive failures lock an email address for fifteen minutes.
State lives in the process only; a restart clears all lockouts.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

MAX_FAILED_ATTEMPTS: int = 5
LOCKOUT_DURATION: timedelta = timedelta(minutes=15)
STALE_AFTER: timedelta = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LoginAttemptTracker:
    """단일 이메일에 대한 실패 횟수와 잠금 상태.

    Failure counter and lock state for one email address.

    Attributes:
        failed_attempts: 연속 실패 횟수 (Consecutive failures)
        last_attempt: 마지막 실패 시각 (Time of the last failure)
        locked_until: 잠금 해제 시각, 없으면 None (Lock expiry or None)
    """

    clock: Callable[[], datetime] = field(default=_utcnow, repr=False)
    failed_attempts: int = 0
    last_attempt: datetime | None = None
    locked_until: datetime | None = None

    def increment(self) -> None:
        """실패 1회를 기록하고, 한도에 도달하면 잠급니다."""
        now: datetime = self.clock()
        self.failed_attempts += 1
        self.last_attempt = now
        if self.failed_attempts >= MAX_FAILED_ATTEMPTS:
            self.locked_until = now + LOCKOUT_DURATION

    def is_locked(self) -> bool:
        """잠금 여부. 잠금 시간이 지났으면 자동으로 초기화합니다.

        Return True while the lockout is active. An expired lockout resets
        the tracker so the member starts over with a clean counter.
        """
        if self.locked_until is None:
            return False
        if self.clock() < self.locked_until:
            return True
        self.reset()
        return False

    def reset(self) -> None:
        self.failed_attempts = 0
        self.locked_until = None

    def is_stale(self, max_age: timedelta = STALE_AFTER) -> bool:
        if self.last_attempt is None:
            return True
        return self.clock() - self.last_attempt > max_age


class LoginAttemptRegistry:
    """이메일별 트래커 저장소.

    Registry of trackers keyed by lowercase email.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock: Callable[[], datetime] = clock
        self._trackers: dict[str, LoginAttemptTracker] = {}

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    def get(self, email: str) -> LoginAttemptTracker | None:
        return self._trackers.get(self._key(email))

    def is_locked(self, email: str) -> bool:
        tracker: LoginAttemptTracker | None = self.get(email)
        return tracker is not None and tracker.is_locked()

    def record_failure(self, email: str) -> LoginAttemptTracker:
        key: str = self._key(email)
        tracker: LoginAttemptTracker | None = self._trackers.get(key)
        if tracker is None:
            tracker = LoginAttemptTracker(clock=self._clock)
            self._trackers[key] = tracker
        tracker.increment()
        return tracker

    def reset(self, email: str) -> None:
        self._trackers.pop(self._key(email), None)

    def prune(self, max_age: timedelta = STALE_AFTER) -> int:
        """오래된 항목을 제거하고 제거 개수를 반환합니다.

        Drop trackers whose last failure is older than ``max_age``.
        Returns the number of removed entries.
        """
        stale: list[str] = [
            key for key, tracker in self._trackers.items() if tracker.is_stale(max_age)
        ]
        for key in stale:
            del self._trackers[key]
        return len(stale)

    def clear(self) -> None:
        self._trackers.clear()

    def __len__(self) -> int:
        return len(self._trackers)


# 싱글턴 인스턴스 — Process-wide registry
login_attempts: LoginAttemptRegistry = LoginAttemptRegistry()
