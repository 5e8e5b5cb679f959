"""reCAPTCHA 검증 테스트 — httpx.MockTransport로 Google 응답을 대체합니다."""

import httpx
import pytest

from app.services.recaptcha_service import ReCaptchaService
from app.utils.exceptions import BadRequestError


def _service(handler) -> ReCaptchaService:
    return ReCaptchaService(transport=httpx.MockTransport(handler))


class TestReCaptchaService:
    async def test_success(self):
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.content.decode()
            return httpx.Response(200, json={"success": True})

        assert await _service(handler).verify_token("client-token") is True
        assert "response=client-token" in seen["body"]

    async def test_rejected_token(self):
        service = _service(lambda request: httpx.Response(200, json={"success": False, "error-codes": ["invalid-input-response"]}))
        assert await service.verify_token("bad-token") is False

    async def test_http_error_status(self):
        service = _service(lambda request: httpx.Response(500))
        assert await service.verify_token("client-token") is False

    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        assert await _service(handler).verify_token("client-token") is False

    async def test_non_json_body(self):
        service = _service(lambda request: httpx.Response(200, text="<html>Gateway</html>"))
        assert await service.verify_token("client-token") is False

    async def test_json_body_not_an_object(self):
        service = _service(lambda request: httpx.Response(200, json=[{"success": True}]))
        assert await service.verify_token("client-token") is False

    @pytest.mark.parametrize("token", [None, "", "   "])
    async def test_blank_token(self, token):
        with pytest.raises(BadRequestError):
            await _service(lambda request: httpx.Response(200, json={"success": True})).verify_token(token)
