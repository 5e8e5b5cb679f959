"""reCAPTCHA 검증 서비스.

reCAPTCHA verification service — Posts the client token to Google's
siteverify endpoint. Transport and protocol failures count as a failed
verification and are logged; only a blank token is a client error.
"""

from typing import Any

import httpx
from loguru import logger

from app.config import settings
from app.utils.exceptions import BadRequestError

VERIFY_TIMEOUT_SECONDS: float = 10.0


class ReCaptchaService:
    """reCAPTCHA 토큰 검증기.

    Attributes:
        transport: 테스트용 httpx 전송 계층 (Optional httpx transport, e.g. MockTransport)
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.transport: httpx.AsyncBaseTransport | None = transport

    async def verify_token(self, token: str | None) -> bool:
        """reCAPTCHA 토큰을 검증합니다.

        Verify a reCAPTCHA response token.

        Args:
            token: 클라이언트가 받은 응답 토큰 (Response token from the widget)

        Returns:
            bool: 검증 성공 여부 (True when Google reports success)

        Raises:
            BadRequestError: 빈 토큰 (Blank token)
        """
        if token is None or not token.strip():
            raise BadRequestError("reCAPTCHA token must not be null or blank")

        try:
            async with httpx.AsyncClient(
                timeout=VERIFY_TIMEOUT_SECONDS, transport=self.transport
            ) as client:
                response: httpx.Response = await client.post(
                    settings.RECAPTCHA_VERIFY_URL,
                    data={"secret": settings.RECAPTCHA_SECRET_KEY, "response": token},
                )
        except httpx.HTTPError as e:
            logger.error(f"reCAPTCHA verification request failed: {e}")
            return False

        if response.status_code != 200:
            logger.warning(f"reCAPTCHA verification returned HTTP {response.status_code}")
            return False

        try:
            body: Any = response.json()
        except ValueError:
            logger.warning("reCAPTCHA verification returned a non-JSON body")
            return False
        if not isinstance(body, dict):
            logger.warning("reCAPTCHA verification returned an unexpected body")
            return False

        if not body.get("success", False):
            logger.warning(f"reCAPTCHA verification failed: {body.get('error-codes', [])}")
            return False

        return True


# 싱글턴 인스턴스 — Singleton instance
recaptcha_service: ReCaptchaService = ReCaptchaService()
