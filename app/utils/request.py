"""요청 메타데이터 헬퍼.

Request metadata helpers shared by routers and the logging middleware.
"""

from starlette.requests import Request


def get_client_ip(request: Request) -> str:
    """클라이언트 IP를 추출합니다.

    Resolve the client IP: first X-Forwarded-For entry, then X-Real-IP,
    then the socket peer address.
    """
    forwarded_for: str | None = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip: str | None = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client is not None:
        return request.client.host
    return "unknown"
