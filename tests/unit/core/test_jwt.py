import time

import jwt
import pytest

from app.core.jwt import JWTVerifier

SECRET = "unit-test-secret-with-at-least-32-bytes"
SUPABASE_URL = "https://proj.supabase.co"


def _token(**overrides):
    now = int(time.time())
    claims = {
        "sub": "5b1f0f7e-0000-4000-8000-000000000001",
        "email": "qa@example.com",
        "aud": "authenticated",
        "iss": f"{SUPABASE_URL}/auth/v1",
        "iat": now,
        "exp": now + 3600,
        "app_metadata": {"role": "admin"},
    }
    claims.update(overrides)
    return jwt.encode(claims, SECRET, algorithm="HS256")


@pytest.fixture
def verifier():
    return JWTVerifier(SUPABASE_URL, SECRET)


@pytest.mark.asyncio
async def test_valid_token(verifier):
    claims = await verifier.verify_token(_token())

    assert claims.email == "qa@example.com"
    assert claims.app_metadata == {"role": "admin"}


@pytest.mark.asyncio
async def test_expired_token(verifier):
    with pytest.raises(jwt.InvalidTokenError, match="expired"):
        await verifier.verify_token(_token(exp=int(time.time()) - 10))


@pytest.mark.asyncio
async def test_wrong_issuer(verifier):
    with pytest.raises(jwt.InvalidTokenError, match="issuer"):
        await verifier.verify_token(_token(iss="https://elsewhere/auth/v1"))


@pytest.mark.asyncio
async def test_wrong_secret(verifier):
    token = jwt.encode({"sub": "x"}, "another-secret-value-that-is-also-long-enough", algorithm="HS256")
    with pytest.raises(jwt.InvalidTokenError):
        await verifier.verify_token(token)


@pytest.mark.asyncio
async def test_missing_secret():
    with pytest.raises(jwt.InvalidTokenError, match="not configured"):
        await JWTVerifier(SUPABASE_URL, "").verify_token(_token())
