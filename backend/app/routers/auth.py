from datetime import timedelta

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..deps import get_session
from ..domain.errors import EmailAlreadyRegisteredError, InvalidCredentialsError
from ..infrastructure.repositories import SqlAlchemyUserRepository
from ..models import User
from ..schemas import AuthResponse, LoginRequest, RegisterRequest
from ..usecases import auth as auth_usecase
from ..utils.activity import record_activity
from ..utils.auth import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_token(user: User) -> str:
    settings = get_settings()
    return create_access_token(
        user_id=user.id,
        role=user.role.value,
        secret=settings.auth_secret,
        algorithm=settings.auth_algorithm,
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
) -> AuthResponse:
    user_repo = SqlAlchemyUserRepository(session)
    try:
        async with session.begin():
            user = await auth_usecase.register_user(
                user_repo,
                name=payload.name,
                email=payload.email,
                password=payload.password,
                role=payload.role,
            )
    except (EmailAlreadyRegisteredError, IntegrityError):
        # IntegrityError: a concurrent registration won the unique email index.
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    background_tasks.add_task(
        record_activity, "register", "user", user.id, user.id, {"email": user.email, "role": user.role}
    )
    return AuthResponse.from_db(user=user, token=_issue_token(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
) -> AuthResponse:
    user_repo = SqlAlchemyUserRepository(session)
    try:
        user = await auth_usecase.authenticate_user(user_repo, email=payload.email, password=payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))

    background_tasks.add_task(record_activity, "login", "user", user.id, user.id, {"email": user.email})
    return AuthResponse.from_db(user=user, token=_issue_token(user))
