from typing import Optional
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from daily_diet.core.config import settings


def new_session_token() -> str:
    """Новый непрозрачный sessionId."""
    return str(uuid4())


def set_session_cookie(response: Response, session_id: str) -> None:
    max_age = int(settings.SESSION_COOKIE_MAX_AGE_DAYS) * 24 * 60 * 60
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session_id,
        httponly=True,
        secure=bool(settings.SESSION_COOKIE_SECURE),
        samesite="lax",
        max_age=max_age,
        path=settings.SESSION_COOKIE_PATH,
    )


def read_session_id(request: Request) -> Optional[str]:
    """sessionId из cookie или выданный SessionCookieMiddleware на этом запросе."""
    return (
        request.cookies.get(settings.SESSION_COOKIE_NAME)
        or getattr(request.state, "issued_session_id", None)
    )


class SessionCookieMiddleware(BaseHTTPMiddleware):
    """
    Выдает sessionId запросу без cookie и прикрепляет cookie к любому ответу,
    в том числе к 4xx/5xx. В БД ничего не пишет: пользователь создается
    уже в обработчике, после валидации запроса.
    """

    async def dispatch(self, request: Request, call_next):
        issued = None
        if settings.AUTO_PROVISION_SESSIONS and not request.cookies.get(settings.SESSION_COOKIE_NAME):
            issued = new_session_token()
            request.state.issued_session_id = issued

        response = await call_next(request)

        if issued is not None:
            set_session_cookie(response, issued)
        return response
