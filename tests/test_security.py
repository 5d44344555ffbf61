import pytest

from app.core.security import hash_password, new_session_token, verify_password


@pytest.mark.asyncio
async def test_hash_password():
    password_hash = await hash_password("secret123")
    assert password_hash != "secret123"
    assert await verify_password("secret123", password_hash)
    assert not await verify_password("secret124", password_hash)


@pytest.mark.asyncio
async def test_verify_password_invalid_hash():
    assert not await verify_password("secret123", "not a bcrypt hash")


def test_new_session_token():
    tokens = {new_session_token() for _ in range(100)}
    assert len(tokens) == 100
    assert all(len(token) >= 32 for token in tokens)
