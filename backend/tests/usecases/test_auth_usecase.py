from datetime import datetime, timezone
from typing import Optional

import pytest
from app.domain.errors import EmailAlreadyRegisteredError, InvalidCredentialsError
from app.models import User, UserRole
from app.usecases import auth as uc
from app.utils.auth import verify_password


class FakeUserRepo:
    def __init__(self) -> None:
        self.users: dict[str, User] = {}

    async def get_by_email(self, email: str) -> Optional[User]:
        return self.users.get(email)

    async def create(self, *, name: str, email: str, password_hash: str, role: UserRole) -> User:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        user = User(
            id=len(self.users) + 1,
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            created_at=now,
            updated_at=now,
        )
        self.users[email] = user
        return user


@pytest.mark.asyncio
async def test_register_hashes_password_and_normalizes_email() -> None:
    repo = FakeUserRepo()
    user = await uc.register_user(repo, name=" Ana ", email="Ana@Example.com", password="hunter22", role=UserRole.OWNER)
    assert user.email == "ana@example.com"
    assert user.name == "Ana"
    assert user.role == UserRole.OWNER
    assert user.password_hash != "hunter22"
    assert verify_password("hunter22", user.password_hash)


@pytest.mark.asyncio
async def test_register_rejects_duplicate_email() -> None:
    repo = FakeUserRepo()
    await uc.register_user(repo, name="A", email="a@example.com", password="secret1")
    with pytest.raises(EmailAlreadyRegisteredError):
        await uc.register_user(repo, name="B", email="A@example.com", password="secret2")


@pytest.mark.asyncio
async def test_authenticate_checks_password() -> None:
    repo = FakeUserRepo()
    await uc.register_user(repo, name="A", email="a@example.com", password="secret1")

    user = await uc.authenticate_user(repo, email="a@example.com", password="secret1")
    assert user.email == "a@example.com"

    with pytest.raises(InvalidCredentialsError):
        await uc.authenticate_user(repo, email="a@example.com", password="wrong")
    with pytest.raises(InvalidCredentialsError):
        await uc.authenticate_user(repo, email="nobody@example.com", password="secret1")
