from fastapi import APIRouter, Depends, Response, status

from daily_diet.core.dependencies import SessionContext, get_session_context
from daily_diet.core.session import new_session_token, set_session_cookie
from daily_diet.schemas.user import UserCreate, UserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
        user_data: UserCreate,
        response: Response,
        session: SessionContext = Depends(get_session_context),
):
    """
    Явно завести пользователя для текущей сессии.
    Повторный вызов с той же cookie возвращает существующего пользователя (200).
    """
    if session.session_id is None:
        # Автовыдача выключена, а cookie нет: регистрация выдает сессию сама
        session.session_id = new_session_token()
        set_session_cookie(response, session.session_id)

    user, created = await session.get_or_create_user(name=user_data.name)
    if not created:
        response.status_code = status.HTTP_200_OK

    return user


@router.get("/me", response_model=UserRead)
async def get_me(session: SessionContext = Depends(get_session_context)):
    return await session.get_user()
