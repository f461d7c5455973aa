from ..domain.errors import EmailAlreadyRegisteredError, InvalidCredentialsError
from ..domain.repositories import UserRepository
from ..models import User, UserRole
from ..utils.auth import hash_password, verify_password


async def register_user(
    user_repo: UserRepository,
    *,
    name: str,
    email: str,
    password: str,
    role: UserRole = UserRole.USER,
) -> User:
    email = email.strip().lower()
    if await user_repo.get_by_email(email) is not None:
        raise EmailAlreadyRegisteredError("Email already registered")
    return await user_repo.create(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        role=role,
    )


async def authenticate_user(user_repo: UserRepository, *, email: str, password: str) -> User:
    user = await user_repo.get_by_email(email.strip().lower())
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError("Invalid email or password")
    return user
