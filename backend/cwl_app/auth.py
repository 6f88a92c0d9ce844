import secrets

from fastapi import Depends, Header, HTTPException, status

from cwl_app.core.config import Settings, get_settings


def check_password(candidate: str, settings: Settings) -> bool:
    return secrets.compare_digest(candidate.encode("utf-8"), settings.admin_password.encode("utf-8"))


def require_admin(
    x_admin_password: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Gate for administrator endpoints: one shared static password."""
    if not x_admin_password or not check_password(x_admin_password, settings):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Admin password required")
