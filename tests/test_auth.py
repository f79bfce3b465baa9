"""인증 API 테스트 — 회원가입, 로그인, 토큰 갱신, /me 엔드포인트.

Auth API tests — Sign-up, sign-in, token refresh, and /me endpoints.
Covers response shapes, identical 401 bodies for distinct causes,
background refresh token persistence, and concurrent sign-ins.
"""

import asyncio
import time
from datetime import datetime, timedelta, timezone

from httpx import AsyncClient
from sqlalchemy import delete

from tokenauth.database import async_session
from tokenauth.models import User
from tokenauth.repositories.user_repository import user_repository
from tokenauth.services import auth_service as auth_service_module
from tokenauth.utils.jwt import access_token_issuer
from tokenauth.utils.password import verify_password
from tests.conftest import AUTH, auth_header, find_stored_token


# ===== Sign-up =====

class TestSignUp:
    """회원가입 테스트."""

    async def test_signup_success(self, client: AsyncClient, token_store):
        """회원가입 성공 — 201, 숫자 user_id."""
        res = await client.post(f"{AUTH}/signup", json={
            "login": "alice",
            "password": "secret123",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["message"] == "User created successfully"
        assert isinstance(data["user_id"], int)
        assert data["login"] == "alice"
        assert data["refresh_token"]

        # 리프레시 토큰은 백그라운드에서 저장됨
        await token_store.drain()
        stored = await find_stored_token(data["refresh_token"])
        assert stored is not None
        assert stored.user_id == data["user_id"]

    async def test_signup_stores_hash_not_plaintext(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/signup", json={
            "login": "alice",
            "password": "secret123",
        })
        assert res.status_code == 201

        async with async_session() as session:
            user = await user_repository.get_by_login(session, "alice")
        assert user.password_hash != "secret123"
        assert verify_password("secret123", user.password_hash)

    async def test_signup_then_signin(self, client: AsyncClient):
        """회원가입 후 같은 자격 증명으로 로그인 — expires_at ≈ now+24h."""
        signup = await client.post(f"{AUTH}/signup", json={
            "login": "alice",
            "password": "secret123",
        })
        assert signup.status_code == 201

        res = await client.post(f"{AUTH}/signin", json={
            "login": "alice",
            "password": "secret123",
        })
        assert res.status_code == 200
        data = res.json()
        assert data["user_id"] == signup.json()["user_id"]
        assert abs(data["expires_at"] - (int(time.time()) + 24 * 3600)) <= 5

    async def test_signup_empty_login(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/signup", json={"login": "", "password": "secret123"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Login and password are required"

    async def test_signup_missing_password(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/signup", json={"login": "alice"})
        assert res.status_code == 400

    async def test_signup_malformed_body(self, client: AsyncClient):
        res = await client.post(
            f"{AUTH}/signup",
            content="not json",
            headers={"Content-Type": "application/json"},
        )
        assert res.status_code == 400
        assert res.json()["detail"] == "Invalid request body"

    async def test_signup_duplicate_login(self, client: AsyncClient, alice):
        """중복 로그인은 사용자 생성 실패(500) — 기존 계정은 그대로."""
        res = await client.post(f"{AUTH}/signup", json={
            "login": "alice",
            "password": "another-password",
        })
        assert res.status_code == 500
        assert res.json()["detail"] == "Failed to create user"

        signin = await client.post(f"{AUTH}/signin", json={
            "login": "alice",
            "password": "secret123",
        })
        assert signin.status_code == 200
        assert signin.json()["user_id"] == alice.id

    async def test_signup_password_too_long(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/signup", json={
            "login": "alice",
            "password": "x" * 73,
        })
        assert res.status_code == 400


# ===== Sign-in =====

class TestSignIn:
    """로그인 테스트."""

    async def test_signin_success(self, client: AsyncClient, alice, token_store):
        res = await client.post(f"{AUTH}/signin", json={
            "login": "alice",
            "password": "secret123",
        })
        assert res.status_code == 200
        data = res.json()
        assert data["user_id"] == alice.id
        assert data["login"] == "alice"
        assert data["token_type"] == "bearer"

        claims = access_token_issuer.verify(data["token"])
        assert claims.user_id == alice.id
        assert claims.login == "alice"
        assert claims.exp == data["expires_at"]

        await token_store.drain()
        stored = await find_stored_token(data["refresh_token"])
        assert stored is not None
        assert stored.user_id == alice.id

    async def test_wrong_password_and_unknown_login_identical(self, client: AsyncClient, alice):
        """잘못된 비밀번호와 존재하지 않는 로그인은 동일한 401 응답."""
        wrong_password = await client.post(f"{AUTH}/signin", json={
            "login": "alice",
            "password": "wrong-password",
        })
        unknown_login = await client.post(f"{AUTH}/signin", json={
            "login": "nobody",
            "password": "secret123",
        })
        assert wrong_password.status_code == 401
        assert unknown_login.status_code == 401
        assert wrong_password.json() == unknown_login.json() == {"detail": "Invalid credentials"}

    async def test_unknown_login_runs_bcrypt(self, client: AsyncClient, alice, monkeypatch):
        """존재하지 않는 로그인도 bcrypt 검증을 한 번 수행."""
        checked: list[str] = []

        def _recording_verify(plain: str, hashed: str) -> bool:
            checked.append(hashed)
            return verify_password(plain, hashed)

        monkeypatch.setattr(auth_service_module, "verify_password", _recording_verify)
        res = await client.post(f"{AUTH}/signin", json={
            "login": "nobody",
            "password": "secret123",
        })
        assert res.status_code == 401
        assert checked == [auth_service_module._DUMMY_PASSWORD_HASH]

    async def test_signin_rejects_bytes_past_72(self, client: AsyncClient):
        """72바이트 이후 접미사가 붙은 비밀번호는 401 (bcrypt 절단 방지)."""
        password = "p" * 72
        signup = await client.post(f"{AUTH}/signup", json={"login": "carol", "password": password})
        assert signup.status_code == 201

        ok = await client.post(f"{AUTH}/signin", json={"login": "carol", "password": password})
        assert ok.status_code == 200

        res = await client.post(f"{AUTH}/signin", json={
            "login": "carol",
            "password": password + "anything",
        })
        assert res.status_code == 401
        assert res.json() == {"detail": "Invalid credentials"}

    async def test_signin_empty_fields(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/signin", json={"login": "alice", "password": ""})
        assert res.status_code == 400

    async def test_signin_wrong_type(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/signin", json={"login": ["alice"], "password": "secret123"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Invalid request body"


# ===== Token Refresh =====

class TestRefresh:
    """토큰 갱신 테스트."""

    async def _sign_in(self, client: AsyncClient, token_store) -> dict:
        res = await client.post(f"{AUTH}/signin", json={
            "login": "alice",
            "password": "secret123",
        })
        assert res.status_code == 200
        await token_store.drain()
        return res.json()

    async def test_refresh_success(self, client: AsyncClient, alice, token_store):
        """갱신 결과는 같은 신원, 다른 토큰 값."""
        signin = await self._sign_in(client, token_store)

        res = await client.post(f"{AUTH}/refresh", json={
            "refresh_token": signin["refresh_token"],
        })
        assert res.status_code == 200
        data = res.json()
        assert data["user_id"] == signin["user_id"]
        assert data["login"] == signin["login"]
        assert data["token"] != signin["token"]
        assert data["refresh_token"] == signin["refresh_token"]

        old_claims = access_token_issuer.verify(signin["token"])
        new_claims = access_token_issuer.verify(data["token"])
        assert (new_claims.user_id, new_claims.login) == (old_claims.user_id, old_claims.login)

    async def test_refresh_token_is_reusable(self, client: AsyncClient, alice, token_store):
        """리프레시 토큰은 회전되지 않음 — 반복 사용 가능."""
        signin = await self._sign_in(client, token_store)
        for _ in range(2):
            res = await client.post(f"{AUTH}/refresh", json={
                "refresh_token": signin["refresh_token"],
            })
            assert res.status_code == 200

    async def test_refresh_unknown_token(self, client: AsyncClient, alice):
        res = await client.post(f"{AUTH}/refresh", json={
            "refresh_token": "never-issued-token",
        })
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid or expired refresh token"

    async def test_refresh_empty_token(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": ""})
        assert res.status_code == 400
        assert res.json()["detail"] == "Refresh token is required"

    async def test_refresh_owner_missing(self, client: AsyncClient, alice, token_store):
        """소유자가 없는 토큰은 알 수 없는 토큰과 동일한 401."""
        signin = await self._sign_in(client, token_store)
        async with async_session() as session:
            await session.execute(delete(User).where(User.id == alice.id))
            await session.commit()

        orphaned = await client.post(f"{AUTH}/refresh", json={
            "refresh_token": signin["refresh_token"],
        })
        unknown = await client.post(f"{AUTH}/refresh", json={
            "refresh_token": "never-issued-token",
        })
        assert orphaned.status_code == 401
        assert orphaned.json() == unknown.json()

    async def test_signup_token_refreshes(self, client: AsyncClient, token_store):
        """회원가입 시 발급된 리프레시 토큰으로도 갱신 가능."""
        signup = await client.post(f"{AUTH}/signup", json={
            "login": "bob",
            "password": "hunter22",
        })
        await token_store.drain()

        res = await client.post(f"{AUTH}/refresh", json={
            "refresh_token": signup.json()["refresh_token"],
        })
        assert res.status_code == 200
        assert res.json()["login"] == "bob"


# ===== /me Endpoint =====

class TestGetMe:
    """현재 사용자 조회 테스트."""

    async def test_get_me_success(self, client: AsyncClient, alice):
        token, _ = access_token_issuer.issue(alice.id, alice.login)
        res = await client.get(f"{AUTH}/me", headers=auth_header(token))
        assert res.status_code == 200
        assert res.json() == {"user_id": alice.id, "login": "alice"}

    async def test_get_me_no_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me")
        assert res.status_code == 401

    async def test_get_me_expired_token(self, client: AsyncClient, alice):
        issued = datetime.now(timezone.utc) - timedelta(hours=25)
        token, _ = access_token_issuer.issue(alice.id, alice.login, now=issued)
        res = await client.get(f"{AUTH}/me", headers=auth_header(token))
        assert res.status_code == 401
        assert res.json()["detail"] == "Token has expired"

    async def test_get_me_premature_token(self, client: AsyncClient, alice):
        issued = datetime.now(timezone.utc) + timedelta(hours=1)
        token, _ = access_token_issuer.issue(alice.id, alice.login, now=issued)
        res = await client.get(f"{AUTH}/me", headers=auth_header(token))
        assert res.status_code == 401
        assert res.json()["detail"] == "Token is not yet valid"

    async def test_get_me_invalid_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me", headers=auth_header("invalid.jwt.token"))
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid token"

    async def test_get_me_deleted_user(self, client: AsyncClient, alice):
        token, _ = access_token_issuer.issue(alice.id, alice.login)
        async with async_session() as session:
            await session.execute(delete(User).where(User.id == alice.id))
            await session.commit()

        res = await client.get(f"{AUTH}/me", headers=auth_header(token))
        assert res.status_code == 401


# ===== Concurrency =====

class TestConcurrentSignIn:
    """동시 로그인 — 요청 간 간섭 없음."""

    async def test_concurrent_signins(self, client: AsyncClient, alice, token_store):
        responses = await asyncio.gather(*[
            client.post(f"{AUTH}/signin", json={"login": "alice", "password": "secret123"})
            for _ in range(5)
        ])
        assert all(r.status_code == 200 for r in responses)

        tokens = {r.json()["token"] for r in responses}
        refresh_tokens = {r.json()["refresh_token"] for r in responses}
        assert len(tokens) == 5
        assert len(refresh_tokens) == 5
        for token in tokens:
            assert access_token_issuer.verify(token).user_id == alice.id

        await token_store.drain()
        for refresh_token in refresh_tokens:
            stored = await find_stored_token(refresh_token)
            assert stored is not None
            assert stored.user_id == alice.id


# ===== Health =====

class TestHealth:
    async def test_health_reports_writer(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.status_code == 200
        data = res.json()
        assert data["status"] == "ok"
        assert data["refresh_token_writer"]["running"] is True
