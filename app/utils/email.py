"""이메일 발송 유틸리티 — SMTP (aiosmtplib).

SMTP 설정은 config.py의 SMTP_* 환경 변수로 관리.
"""

from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from app.config import settings


async def send_email(
    to: str,
    subject: str,
    html: str,
    text: str | None = None,
    from_address: str | None = None,
    attachments: list[tuple[str, bytes, str]] | None = None,
) -> None:
    """이메일 발송.

    Args:
        to: 수신자 이메일 주소
        subject: 제목
        html: HTML 본문
        text: 플레인텍스트 본문 (선택)
        from_address: 발신 주소, 없으면 SMTP_FROM_EMAIL
        attachments: (파일명, 내용, content type) 목록

    Raises:
        aiosmtplib.SMTPException: SMTP 전송 실패
    """
    sender: str = from_address or settings.SMTP_FROM_EMAIL

    msg = MIMEMultipart("mixed" if attachments else "alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.SMTP_FROM_NAME} <{sender}>"
    msg["To"] = to

    if attachments:
        body = MIMEMultipart("alternative")
        if text:
            body.attach(MIMEText(text, "plain", "utf-8"))
        body.attach(MIMEText(html, "html", "utf-8"))
        msg.attach(body)
        for filename, content, content_type in attachments:
            subtype = content_type.split("/", 1)[-1] if "/" in content_type else "octet-stream"
            part = MIMEApplication(content, _subtype=subtype)
            part.add_header("Content-Disposition", "attachment", filename=filename)
            msg.attach(part)
    else:
        if text:
            msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))

    await aiosmtplib.send(
        msg,
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER or None,
        password=settings.SMTP_PASSWORD or None,
        start_tls=settings.SMTP_START_TLS,
    )
