"""API 요청 로깅 미들웨어 — loguru 및 Axiom.

API request logging middleware.
Every request except health/docs is written to loguru as one line; when
Axiom credentials are configured the same event is also ingested there.
Sensitive fields (password, token, secret, recaptcha) are masked before
they leave the process.
"""

import json
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings
from app.utils.request import get_client_ip

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies and query strings
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential|recaptcha)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

MAX_BODY_LOG_LENGTH: int = 2000
MAX_ERROR_LENGTH: int = 500


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드를 재귀적으로 "***"로 바꿉니다."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else mask_sensitive(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    return data


def _shorten(value: str, max_len: int) -> str:
    if len(value) > max_len:
        return value[:max_len] + "...(truncated)"
    return value


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 기록하는 미들웨어.

    Logs method, path, client IP, masked body, status code, duration and
    the error detail of failed requests.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _read_body(self, request: Request) -> Any:
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        if not request.headers.get("content-type", "").startswith("application/json"):
            return None
        body_bytes: bytes = await request.body()
        if not body_bytes:
            return None
        try:
            return mask_sensitive(json.loads(body_bytes))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    def _ship(self, event: dict[str, Any]) -> None:
        """이벤트를 loguru에 기록하고, 설정되어 있으면 Axiom으로 전송합니다."""
        line: str = f"{event['method']} {event['path']} {event['status_code']} {event['duration_ms']}ms ip={event['client_ip']}"
        if "error" in event:
            logger.warning(f"{line} error={event['error']}")
        else:
            logger.info(line)

        if self._client is None:
            return
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception as e:
            logger.warning(f"Axiom ingest failed: {type(e).__name__}: {e}")

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time: float = time.time()
        request_body: Any = await self._read_body(request)

        error_detail: str | None = None
        status_code: int = 500
        try:
            response: Response = await call_next(request)
            status_code = response.status_code

            # 에러 응답은 body에서 사유를 추출한 뒤 다시 감싸서 반환
            if status_code >= 400:
                resp_body: bytes = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

                try:
                    error_data: Any = json.loads(resp_body)
                    error_detail = str(error_data.get("detail", error_data)) if isinstance(error_data, dict) else str(error_data)
                except (json.JSONDecodeError, UnicodeDecodeError):
                    error_detail = resp_body.decode("utf-8", errors="replace")
                error_detail = error_detail[:MAX_ERROR_LENGTH]

                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event: dict[str, Any] = {
                "method": request.method,
                "path": request.url.path,
                "client_ip": get_client_ip(request),
                "status_code": status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }
            if request.query_params:
                event["query_params"] = mask_sensitive(dict(request.query_params))
            if request_body is not None:
                event["request_body"] = _shorten(json.dumps(request_body, default=str), MAX_BODY_LOG_LENGTH)
            if error_detail:
                event["error"] = error_detail
            self._ship(event)

        return response
