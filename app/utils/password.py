"""비밀번호 해싱 및 검증 유틸리티 모듈.

Password hashing and verification utility module.
Uses bcrypt directly. Passwords are never stored in plain text.
"""

import bcrypt

# bcrypt는 입력의 앞 72바이트만 사용 — bcrypt only consumes the first 72 bytes
_BCRYPT_MAX_BYTES: int = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Hash a plain text password using bcrypt with a random salt.

    Args:
        password: 평문 비밀번호 (Plain text password to hash)

    Returns:
        str: bcrypt 해시 문자열 (Bcrypt hash string, ~60 chars)
    """
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """평문 비밀번호와 bcrypt 해시를 비교 검증합니다.

    Verify a plain text password against a bcrypt hash.
    Accounts created by an administrator have no hash until the member
    completes the password setup; those never verify.

    Args:
        plain_password: 검증할 평문 비밀번호 (Plain text password to verify)
        hashed_password: 저장된 bcrypt 해시 또는 None (Stored hash, may be None)

    Returns:
        bool: 일치하면 True (True if password matches hash)
    """
    if not hashed_password or plain_password is None:
        return False
    return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8"))
