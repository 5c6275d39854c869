from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG_FILE_NAME = "config.yaml"
DEFAULT_PROFILE_URL = "https://static.example.com/images/default-profile.png"


@dataclass(slots=True)
class OAuthProviderConfig:
    client_id: str
    client_secret: str
    redirect_uri: str
    authorize_url: str
    token_url: str
    profile_url: str
    scope: str = ""


@dataclass(slots=True)
class SessionConfig:
    secret: str
    algorithm: str = "HS256"
    ttl_seconds: int = 60 * 60 * 24
    cookie_name: str = "AG3_JWT"
    # 비어 있으면 요청 host 를 쿠키 도메인으로 사용한다.
    cookie_domain: str | None = None
    cookie_secure: bool = False


@dataclass(slots=True)
class AppConfig:
    """community-service 전체 설정 루트.

    - 비밀값이 아닌 설정은 config.yaml 에, client secret / JWT secret 은 환경변수에 둔다.
    - Identity Linker / Session Credential Issuer / OAuth 클라이언트에 생성 시점에 주입된다.
    """

    session: SessionConfig
    kakao: OAuthProviderConfig
    google: OAuthProviderConfig
    client_url: str = "http://localhost:3000"
    profile_url: str = DEFAULT_PROFILE_URL
    http_timeout_seconds: float = 10.0


def _find_config_path() -> Path | None:
    """현재 작업 디렉토리 기준으로 상위로 올라가며 config.yaml 을 찾는다.

    파일이 없으면 None 을 반환하고 기본값 + 환경변수만으로 동작한다.
    """

    explicit = os.getenv("COMMUNITY_CONFIG_FILE")
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise RuntimeError(f"COMMUNITY_CONFIG_FILE not found: {explicit}")
        return path

    current = Path.cwd()
    for directory in (current, *current.parents):
        candidate = directory / DEFAULT_CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def _load_yaml() -> dict[str, Any]:
    path = _find_config_path()
    if path is None:
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise RuntimeError(f"invalid config format in {path}: expected a mapping")
    return data


def _env_or(name: str, fallback: Any) -> str:
    value = os.getenv(name, "").strip()
    if value:
        return value
    return "" if fallback is None else str(fallback)


def _as_int(name: str, raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:  # noqa: TRY003
        raise RuntimeError(f"invalid {name}: {raw!r}") from exc


def _as_float(name: str, raw: Any) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:  # noqa: TRY003
        raise RuntimeError(f"invalid {name}: {raw!r}") from exc


def _load_session(section: dict[str, Any]) -> SessionConfig:
    secret = _env_or("JWT_SECRET", section.get("secret"))
    if not secret:
        raise RuntimeError("JWT_SECRET environment variable is required")

    ttl = _env_or("SESSION_TTL_SECONDS", section.get("ttl_seconds", 60 * 60 * 24))
    secure = _env_or("COOKIE_SECURE", section.get("cookie_secure", False))
    return SessionConfig(
        secret=secret,
        algorithm=_env_or("JWT_ALG", section.get("algorithm", "HS256")),
        ttl_seconds=_as_int("session.ttl_seconds", ttl),
        cookie_name=_env_or("COOKIE_NAME", section.get("cookie_name", "AG3_JWT")),
        cookie_domain=_env_or("COOKIE_DOMAIN", section.get("cookie_domain")) or None,
        cookie_secure=str(secure).lower() in {"1", "true", "yes"},
    )


def _load_provider(
    prefix: str, section: dict[str, Any], defaults: dict[str, str]
) -> OAuthProviderConfig:
    return OAuthProviderConfig(
        client_id=_env_or(f"{prefix}_CLIENT_ID", section.get("client_id")),
        client_secret=_env_or(f"{prefix}_SECRET_ID", section.get("client_secret")),
        redirect_uri=_env_or(
            f"{prefix}_REDIRECT_URI", section.get("redirect_uri")
        ),
        authorize_url=str(section.get("authorize_url") or defaults["authorize_url"]),
        token_url=str(section.get("token_url") or defaults["token_url"]),
        profile_url=str(section.get("profile_url") or defaults["profile_url"]),
        scope=str(section.get("scope") or defaults.get("scope", "")),
    )


KAKAO_DEFAULTS = {
    "authorize_url": "https://kauth.kakao.com/oauth/authorize",
    "token_url": "https://kauth.kakao.com/oauth/token",
    "profile_url": "https://kapi.kakao.com/v2/user/me",
}

GOOGLE_DEFAULTS = {
    "authorize_url": "https://accounts.google.com/o/oauth2/v2/auth",
    "token_url": "https://oauth2.googleapis.com/token",
    "profile_url": "https://openidconnect.googleapis.com/v1/userinfo",
    "scope": "openid profile",
}


def load_config() -> AppConfig:
    """config.yaml + 환경변수로부터 AppConfig 를 만든다."""

    data = _load_yaml()
    oauth = data.get("oauth") or {}

    return AppConfig(
        session=_load_session(data.get("session") or {}),
        kakao=_load_provider("KAKAO", oauth.get("kakao") or {}, KAKAO_DEFAULTS),
        google=_load_provider("GOOGLE", oauth.get("google") or {}, GOOGLE_DEFAULTS),
        client_url=_env_or("CLIENT_URL", data.get("client_url", "http://localhost:3000")),
        profile_url=_env_or("PROFILE_URL", data.get("profile_url", DEFAULT_PROFILE_URL)),
        http_timeout_seconds=_as_float(
            "http_timeout_seconds",
            _env_or("OAUTH_HTTP_TIMEOUT", data.get("http_timeout_seconds", 10.0)),
        ),
    )


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """FastAPI DI용 설정 팩토리. 프로세스당 한 번만 로드한다."""

    return load_config()
