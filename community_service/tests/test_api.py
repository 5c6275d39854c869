from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from community_service.app.config import get_config
from community_service.app.main import app
from community_service.app.models.user import SnsIdentity
from community_service.app.services.nickname import get_nickname_generator
from community_service.app.services.oauth_clients import KakaoOAuthClient, get_kakao_client
from community_service.app.services.posts_service import (
    get_bookmark_repository,
    get_post_repository,
)
from community_service.app.services.users_service import get_user_repository


POST_BODY = {
    "category": "study",
    "title": "알고리즘 스터디",
    "content": "매주 토요일",
    "stacks": ["python"],
    "capacity": 5,
    "region": {"lat": 37.5, "lng": 127.0, "address": "서울", "sido": "11"},
    "executionPeriod": ["2024-03-01T00:00:00Z", "2024-05-01T00:00:00Z"],
    "registerDeadline": "2024-02-25T00:00:00Z",
}


@pytest.fixture
def client(services, app_config):
    app.dependency_overrides[get_config] = lambda: app_config
    app.dependency_overrides[get_post_repository] = lambda: services.post_repo
    app.dependency_overrides[get_bookmark_repository] = lambda: services.bookmark_repo
    app.dependency_overrides[get_user_repository] = lambda: services.user_repo
    app.dependency_overrides[get_nickname_generator] = lambda: services.nicknames
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _assert_session_cookie(cookie: str, token: str, expires_at: int) -> None:
    # TestClient 요청의 host 는 testserver 이다.
    expires = format_datetime(datetime.fromtimestamp(expires_at, timezone.utc), usegmt=True)
    assert cookie.startswith(f"AG3_JWT={token};")
    assert "Domain=testserver" in cookie
    assert f"expires={expires}" in cookie
    assert "HttpOnly" in cookie
    assert "SameSite=lax" in cookie


def _login(services, sns_id: str = "1") -> tuple[str, dict[str, str]]:
    result = services.users.login_or_register(SnsIdentity(sns_type="kakao", sns_id=sns_id))
    return result.user.id, {"Authorization": f"Bearer {result.credential.token}"}


def test_health(client) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_create_and_read_post(client, services) -> None:
    user_id, headers = _login(services)

    created = client.post("/api/v1/posts", json=POST_BODY, headers=headers)
    assert created.status_code == 201
    post_id = created.json()["data"]["id"]

    detail = client.get(f"/api/v1/posts/{post_id}")
    assert detail.status_code == 200
    data = detail.json()["data"]
    assert data["author"] == user_id
    assert data["viewCount"] == 1
    assert data["location"] == {"type": "Point", "coordinates": [37.5, 127.0]}
    assert data["startDate"].startswith("2024-03-01T00:00:00")

    listed = client.get("/api/v1/posts", params={"category": "study", "page": 1, "perPage": 10})
    assert listed.status_code == 200
    assert [p["id"] for p in listed.json()["data"]] == [post_id]



def test_list_posts_far_past_the_end(client, services) -> None:
    _, headers = _login(services)
    client.post("/api/v1/posts", json=POST_BODY, headers=headers)

    resp = client.get(
        "/api/v1/posts", params={"category": "study", "page": 10**18, "perPage": 10}
    )

    assert resp.status_code == 200
    assert resp.json()["data"] == []

def test_list_posts_with_invalid_category(client) -> None:
    resp = client.get("/api/v1/posts", params={"category": "hobby"})

    assert resp.status_code == 400
    assert resp.json() == {
        "error": {"code": "INVALID_CATEGORY", "message": "category must be one of: project, study"}
    }


def test_create_post_requires_session(client) -> None:
    resp = client.post("/api/v1/posts", json=POST_BODY)

    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "INVALID_SESSION"


def test_create_post_with_bad_stack(client, services) -> None:
    _, headers = _login(services)

    resp = client.post("/api/v1/posts", json={**POST_BODY, "stacks": ["Python"]}, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "STACK_FORMAT_ERROR"


def test_malformed_body_maps_to_validation_error(client, services) -> None:
    _, headers = _login(services)

    resp = client.post("/api/v1/posts", json={**POST_BODY, "capacity": "many"}, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_update_and_delete_by_non_owner(client, services) -> None:
    _, owner_headers = _login(services, "owner")
    _, other_headers = _login(services, "other")
    post_id = client.post("/api/v1/posts", json=POST_BODY, headers=owner_headers).json()["data"]["id"]

    assert client.put(f"/api/v1/posts/{post_id}", json=POST_BODY, headers=other_headers).status_code == 403
    assert client.delete(f"/api/v1/posts/{post_id}", headers=other_headers).status_code == 403
    assert client.delete(f"/api/v1/posts/{post_id}", headers=owner_headers).status_code == 200
    assert client.get(f"/api/v1/posts/{post_id}").status_code == 404


def test_sign_up_then_login(client) -> None:
    body = {"snsType": "google", "snsId": 777, "imageURL": "https://img.test/a.png"}

    first = client.post("/api/v1/users", json=body)
    second = client.post("/api/v1/users", json=body)

    assert first.status_code == 201
    assert second.status_code == 200
    first_data = first.json()["data"]
    assert first_data["isNew"] is True
    assert second.json()["data"]["isNew"] is False
    assert second.json()["data"]["user"]["id"] == first_data["user"]["id"]
    assert first_data["user"]["imageURL"] == "https://img.test/a.png"

    _assert_session_cookie(
        first.headers["set-cookie"], first_data["token"], first_data["expiresAt"]
    )
    second_data = second.json()["data"]
    _assert_session_cookie(
        second.headers["set-cookie"], second_data["token"], second_data["expiresAt"]
    )


def test_me_profile_and_update(client, services) -> None:
    _, headers = _login(services)

    me = client.get("/api/v1/users/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["data"]["bookmarks"] == []

    updated = client.put(
        "/api/v1/users/me",
        json={"nickname": "새이름", "stacks": ["go"], "region": {"sido": "11", "sigungu": "11140"}},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["region"] == {"sido": "11", "sigungu": "11140"}

    missing = client.put("/api/v1/users/me", json={"stacks": []}, headers=headers)
    assert missing.status_code == 400


def test_nickname_availability(client, services) -> None:
    _login(services)

    assert client.get("/api/v1/users/nickname/아무개").status_code == 200
    taken = client.get("/api/v1/users/nickname/용감한호랑이0001")
    assert taken.status_code == 409
    assert taken.json()["error"]["code"] == "DUPLICATE_NICKNAME"



def test_sns_account_check_for_unknown_account(client, services) -> None:
    resp = client.get("/api/v1/users/kakao/404")

    assert resp.status_code == 200
    assert resp.json()["data"] == {
        "snsType": "kakao",
        "snsId": "404",
        "registered": False,
        "login": None,
    }
    assert "set-cookie" not in resp.headers
    assert services.user_repo.users == {}


def test_sns_account_check_logs_in_existing_account(client, services) -> None:
    user_id, _ = _login(services, sns_id="77")

    resp = client.get("/api/v1/users/kakao/77")

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["registered"] is True
    assert data["login"]["user"]["id"] == user_id
    _assert_session_cookie(
        resp.headers["set-cookie"], data["login"]["token"], data["login"]["expiresAt"]
    )

def test_bookmark_endpoints(client, services) -> None:
    _, headers = _login(services)
    post_id = client.post("/api/v1/posts", json=POST_BODY, headers=headers).json()["data"]["id"]

    added = client.post(f"/api/v1/users/bookmarks/{post_id}", headers=headers)
    assert added.status_code == 201
    assert added.json()["data"] == {"bookmarkCount": 1}

    assert client.post(f"/api/v1/users/bookmarks/{post_id}", headers=headers).status_code == 409

    listed = client.get("/api/v1/users/bookmarks", params={"category": "study"}, headers=headers)
    assert [p["id"] for p in listed.json()["data"]] == [post_id]

    removed = client.delete(f"/api/v1/users/bookmarks/{post_id}", headers=headers)
    assert removed.json()["data"] == {"bookmarkCount": 0}
    assert client.delete(f"/api/v1/users/bookmarks/{post_id}", headers=headers).status_code == 404


def test_kakao_redirect(client) -> None:
    resp = client.get("/api/v1/auth/kakao", follow_redirects=False)

    assert resp.status_code == 307
    assert resp.headers["location"].startswith("https://kauth.kakao.com/oauth/authorize?")


def _kakao_client(app_config, token_status: int = 200) -> KakaoOAuthClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(token_status, json={"access_token": "kakao-token"})
        return httpx.Response(200, json={"id": 555})

    return KakaoOAuthClient(
        app_config.kakao, http_client=httpx.Client(transport=httpx.MockTransport(handler))
    )


def test_kakao_callback_sets_cookie_and_redirects(client, services, app_config) -> None:
    app.dependency_overrides[get_kakao_client] = lambda: _kakao_client(app_config)

    resp = client.get("/api/v1/auth/kakao/callback", params={"code": "abc"}, follow_redirects=False)

    assert resp.status_code == 307
    assert resp.headers["location"] == "http://client.test"
    cookie = resp.headers["set-cookie"]
    token = cookie.split(";", 1)[0].split("=", 1)[1]
    _assert_session_cookie(cookie, token, jwt.get_unverified_claims(token)["exp"])
    assert services.user_repo.find_by_sns("kakao", "555") is not None


def test_kakao_callback_upstream_failure(client, app_config) -> None:
    app.dependency_overrides[get_kakao_client] = lambda: _kakao_client(app_config, token_status=400)

    resp = client.get("/api/v1/auth/kakao/callback", params={"code": "abc"}, follow_redirects=False)

    assert resp.status_code == 502
    assert resp.json()["error"]["code"] == "UPSTREAM_AUTH_FAILURE"


def test_logout_clears_cookie(client) -> None:
    resp = client.post("/api/v1/auth/logout")

    assert resp.status_code == 200
    assert 'AG3_JWT=""' in resp.headers["set-cookie"] or "AG3_JWT=;" in resp.headers["set-cookie"]
