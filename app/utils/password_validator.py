"""비밀번호 정책 검증 모듈.

Password policy validation.
All rules are evaluated and every violation is reported, so the client can
show the complete list at once.
"""

import re
from dataclasses import dataclass, field

MIN_PASSWORD_LENGTH: int = 8
MAX_PASSWORD_LENGTH: int = 128
MIN_CHARACTER_TYPES: int = 2

_LOWERCASE: re.Pattern[str] = re.compile(r"[a-z]")
_UPPERCASE: re.Pattern[str] = re.compile(r"[A-Z]")
_DIGIT: re.Pattern[str] = re.compile(r"[0-9]")
_SPECIAL: re.Pattern[str] = re.compile(r"[!@#$%^&*(),.?\":{}|<>_\-+=\[\]~`]")

# 소문자로 비교하는 흔한 비밀번호 목록 (Lowercase substrings that are rejected)
COMMON_PASSWORDS: tuple[str, ...] = (
    "password", "123456", "123456789", "12345678", "12345", "1234567",
    "password1", "1234567890", "qwerty", "abc123", "111111", "123123",
    "admin", "letmein", "welcome", "monkey", "dragon", "master", "sunshine",
    "princess", "football", "qwerty123", "solo", "passw0rd", "starwars",
    "password123", "login", "admin123", "root", "toor", "pass", "test",
    "guest", "oracle", "cisco", "changeme", "administrator", "user",
)


@dataclass
class ValidationResult:
    """검증 결과. (Outcome of a password validation)"""

    is_valid: bool
    errors: list[str] = field(default_factory=list)

    @property
    def error_message(self) -> str:
        return "; ".join(self.errors)


def _has_sequential_characters(password: str) -> bool:
    lower: str = password.lower()
    for i in range(len(lower) - 2):
        a, b, c = ord(lower[i]), ord(lower[i + 1]), ord(lower[i + 2])
        if b == a + 1 and c == b + 1:
            return True
    return False


def _has_repeated_characters(password: str) -> bool:
    for i in range(len(password) - 2):
        if password[i] == password[i + 1] == password[i + 2]:
            return True
    return False


def validate_password(password: str | None) -> ValidationResult:
    """비밀번호 정책을 검증합니다.

    Validate a password against the policy:
        - 8 to 128 characters
        - at least two of lowercase, uppercase, digits, special characters
        - no commonly used password as a substring (case-insensitive)
        - no three ascending sequential characters (abc, 123)
        - no character repeated three times in a row

    Args:
        password: 검증할 평문 비밀번호 (Plain text password)

    Returns:
        ValidationResult: 유효 여부와 오류 목록 (Validity and error list)
    """
    if password is None or not password.strip():
        return ValidationResult(False, ["Password must not be null or blank"])

    errors: list[str] = []

    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(password) > MAX_PASSWORD_LENGTH:
        errors.append(f"Password must not exceed {MAX_PASSWORD_LENGTH} characters")

    character_types: int = sum(
        1 for pattern in (_LOWERCASE, _UPPERCASE, _DIGIT, _SPECIAL) if pattern.search(password)
    )
    if character_types < MIN_CHARACTER_TYPES:
        errors.append(
            f"Password must contain at least {MIN_CHARACTER_TYPES} of the following: "
            "lowercase, uppercase, numbers, special characters"
        )

    lower: str = password.lower()
    if any(common in lower for common in COMMON_PASSWORDS):
        errors.append("Password contains commonly used patterns and is not secure")

    if _has_sequential_characters(password):
        errors.append("Password contains sequential characters (e.g., abc, 123)")
    if _has_repeated_characters(password):
        errors.append("Password contains too many repeated characters")

    return ValidationResult(not errors, errors)
