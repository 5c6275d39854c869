"""Kakao / Google OAuth 클라이언트.

authorization code 를 provider access token 으로 교환하고 프로필을 가져와 SnsIdentity 로 변환한다.
재시도는 하지 않으며, 모든 실패는 UpstreamAuthFailure 로 통일한다.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx
from fastapi import Depends

from ..config import AppConfig, OAuthProviderConfig, get_config
from ..exceptions import UpstreamAuthFailure
from ..models.user import SnsIdentity


logger = logging.getLogger(__name__)


class OAuthClient:
    """OAuth 2.0 authorization code 흐름의 공통 구현."""

    sns_type: str = ""

    def __init__(
        self,
        config: OAuthProviderConfig,
        timeout_seconds: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._config = config
        self._timeout = timeout_seconds
        # 테스트에서는 MockTransport 기반 클라이언트를 주입한다.
        self._http_client = http_client

    def authorize_url(self) -> str:
        params = {
            "client_id": self._config.client_id,
            "redirect_uri": self._config.redirect_uri,
            "response_type": "code",
        }
        if self._config.scope:
            params["scope"] = self._config.scope
        return f"{self._config.authorize_url}?{urlencode(params)}"

    def fetch_identity(self, code: str | None) -> SnsIdentity:
        if not code:
            raise UpstreamAuthFailure("authorization code is missing")

        access_token = self._exchange_code(code)
        profile = self._request(
            "GET",
            self._config.profile_url,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        try:
            return self._to_identity(profile)
        except (KeyError, TypeError, AttributeError) as exc:
            logger.warning("unexpected %s profile shape: %s", self.sns_type, exc)
            raise UpstreamAuthFailure(
                f"unexpected {self.sns_type} profile response"
            ) from exc

    def _exchange_code(self, code: str) -> str:
        data = self._request(
            "POST",
            self._config.token_url,
            data={
                "grant_type": "authorization_code",
                "client_id": self._config.client_id,
                "client_secret": self._config.client_secret,
                "redirect_uri": self._config.redirect_uri,
                "code": code,
            },
            headers={
                "Content-Type": "application/x-www-form-urlencoded;charset=utf-8"
            },
        )
        access_token = data.get("access_token")
        if not access_token or not isinstance(access_token, str):
            raise UpstreamAuthFailure(f"{self.sns_type} token response has no access_token")
        return access_token

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        client = self._http_client or httpx.Client(timeout=self._timeout)
        try:
            resp = client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s request failed: %s %s: %s", self.sns_type, method, url, exc)
            raise UpstreamAuthFailure(f"{self.sns_type} request failed") from exc
        finally:
            if self._http_client is None:
                client.close()

        if resp.status_code // 100 != 2:
            logger.warning(
                "%s responded with status %s: %s",
                self.sns_type,
                resp.status_code,
                resp.text[:500],
            )
            raise UpstreamAuthFailure(
                f"{self.sns_type} responded with status {resp.status_code}"
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise UpstreamAuthFailure(f"{self.sns_type} returned a non-JSON body") from exc
        if not isinstance(body, dict):
            raise UpstreamAuthFailure(f"{self.sns_type} returned an unexpected body")
        return body

    def _to_identity(self, profile: dict[str, Any]) -> SnsIdentity:  # pragma: no cover - abstract
        raise NotImplementedError


class KakaoOAuthClient(OAuthClient):
    sns_type = "kakao"

    def _to_identity(self, profile: dict[str, Any]) -> SnsIdentity:
        sns_id = profile["id"]
        account = profile.get("kakao_account") or {}
        image_url = (account.get("profile") or {}).get("thumbnail_image_url")
        return SnsIdentity(sns_type=self.sns_type, sns_id=str(sns_id), image_url=image_url or None)


class GoogleOAuthClient(OAuthClient):
    sns_type = "google"

    def _to_identity(self, profile: dict[str, Any]) -> SnsIdentity:
        sns_id = profile["sub"]
        return SnsIdentity(
            sns_type=self.sns_type,
            sns_id=str(sns_id),
            image_url=profile.get("picture") or None,
        )


def get_kakao_client(config: AppConfig = Depends(get_config)) -> KakaoOAuthClient:
    """FastAPI DI용 Kakao OAuth 클라이언트 팩토리."""

    return KakaoOAuthClient(config.kakao, timeout_seconds=config.http_timeout_seconds)


def get_google_client(config: AppConfig = Depends(get_config)) -> GoogleOAuthClient:
    """FastAPI DI용 Google OAuth 클라이언트 팩토리."""

    return GoogleOAuthClient(config.google, timeout_seconds=config.http_timeout_seconds)
