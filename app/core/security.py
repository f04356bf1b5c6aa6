# app/core/security.py
import hmac
import re
from typing import Any, Mapping, Optional

# === App Token（UUID 形狀的共享金鑰）===
APP_TOKEN_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_uuid_shaped(token: Any) -> bool:
    return isinstance(token, str) and APP_TOKEN_PATTERN.match(token) is not None


def validate_app_token(token: Any, expected: Optional[str]) -> bool:
    """
    token 必須是 UUID 格式，且與設定的 APP_TOKEN 完全相同。
    缺少 / 格式錯誤 / 伺服器未設定金鑰 -> False（不拋錯）。
    """
    if not token or not isinstance(token, str):
        return False
    if not expected:
        return False
    if not is_uuid_shaped(token):
        return False
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


def extract_app_token(headers: Mapping[str, str]) -> Optional[str]:
    """先看 X-App-Token，沒有的話退回 Authorization: Bearer <token>"""
    token = headers.get("x-app-token")
    if token:
        return token
    auth = headers.get("authorization")
    if auth:
        return auth.replace("Bearer ", "", 1)
    return None
