"""시스템 메일 HTML 템플릿.

HTML bodies for system mails: the welcome mail with the password setup
link, and the admin notification sent when member data changes.
User-supplied values are HTML-escaped before they are inserted.
"""

from datetime import datetime
from html import escape

WELCOME_SUBJECT: str = "Willkommen - Richten Sie Ihr Passwort ein"
PROFILE_CHANGE_SUBJECT: str = "Mitglied hat Profildaten geändert - {name}"

_WELCOME_HTML: str = """<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: #2c3e50;">Willkommen beim Bunkermuseum!</h2>

        <p>Hallo {name},</p>

        <p>Ein Administrator hat ein Konto für Sie erstellt. Um Ihr Konto zu aktivieren,
        müssen Sie zunächst ein Passwort festlegen.</p>

        <p>Bitte klicken Sie auf den folgenden Link, um Ihr Passwort einzurichten:</p>

        <p style="margin: 30px 0;">
            <a href="{url}"
               style="background-color: #3498db; color: white; padding: 12px 24px;
                      text-decoration: none; border-radius: 4px; display: inline-block;">
                Passwort einrichten
            </a>
        </p>

        <p style="color: #7f8c8d; font-size: 14px;">
            Oder kopieren Sie diesen Link in Ihren Browser:<br>
            <a href="{url}" style="color: #3498db;">{url}</a>
        </p>

        <p style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #ecf0f1; color: #7f8c8d; font-size: 12px;">
            <strong>Wichtig:</strong> Dieser Link ist 24 Stunden gültig.<br>
            Falls Sie dieses Konto nicht angefordert haben, können Sie diese E-Mail ignorieren.
        </p>
    </div>
</body>
</html>
"""

_CHANGE_ITEM_HTML: str = (
    "<li style='margin: 8px 0; padding: 8px; background-color: #f8f9fa; "
    "border-left: 3px solid #3498db;'>{change}</li>"
)

_PROFILE_CHANGE_HTML: str = """<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: #2c3e50; border-bottom: 2px solid #3498db; padding-bottom: 10px;">
            Profildatenänderung durch Mitglied
        </h2>

        <div style="background-color: #ecf0f1; padding: 15px; border-radius: 5px; margin: 20px 0;">
            <p style="margin: 5px 0;"><strong>Mitglied:</strong> {name}</p>
            <p style="margin: 5px 0;"><strong>E-Mail:</strong> {email}</p>
            <p style="margin: 5px 0;"><strong>Zeitpunkt:</strong> {timestamp}</p>
        </div>

        <h3 style="color: #2c3e50; margin-top: 30px;">Geänderte Felder:</h3>
        <ul style="list-style: none; padding: 0;">
            {changes}
        </ul>

        <p style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #ecf0f1; color: #7f8c8d; font-size: 12px;">
            Diese automatische Benachrichtigung wurde vom Bunkermuseum-Verwaltungssystem gesendet.<br>
            Sie können die vollständigen Mitgliederdaten im Admin-Dashboard einsehen.
        </p>
    </div>
</body>
</html>
"""


def render_welcome(name: str, setup_url: str) -> str:
    """비밀번호 설정 링크가 담긴 환영 메일 본문."""
    return _WELCOME_HTML.format(name=escape(name), url=escape(setup_url))


def render_profile_change(name: str, email: str, changed_at: datetime, changes: list[str]) -> str:
    """회원 데이터 변경 알림 본문. 시각은 dd.MM.yyyy HH:mm:ss 형식."""
    items: str = "".join(_CHANGE_ITEM_HTML.format(change=escape(change)) for change in changes)
    return _PROFILE_CHANGE_HTML.format(
        name=escape(name),
        email=escape(email),
        timestamp=changed_at.strftime("%d.%m.%Y %H:%M:%S"),
        changes=items,
    )
