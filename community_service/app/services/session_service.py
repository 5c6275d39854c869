from __future__ import annotations

import time
from collections.abc import Callable

from fastapi import Depends
from jose import ExpiredSignatureError, JWTError, jwt

from ..config import AppConfig, SessionConfig, get_config
from ..exceptions import InvalidSession
from ..models.session import SessionCredential


class SessionIssuer:
    """유저 ID를 서명된 JWT 세션 토큰으로 감싸고, 다시 검증하는 Session Credential Issuer.

    - 만료 정책(TTL)은 호출자가 아니라 SessionConfig 가 소유한다.
    - 토큰 payload: sub(유저 ID), iat, exp (epoch seconds)
    """

    def __init__(
        self,
        config: SessionConfig,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._clock = clock

    def issue(self, user_id: str) -> SessionCredential:
        issued_at = int(self._clock())
        expires_at = issued_at + self._config.ttl_seconds
        payload = {"sub": str(user_id), "iat": issued_at, "exp": expires_at}
        token = jwt.encode(
            payload, self._config.secret, algorithm=self._config.algorithm
        )
        return SessionCredential(token=token, expires_at=expires_at)

    def verify(self, token: str) -> str:
        """토큰을 검증하고 유저 ID를 반환한다. 실패하면 InvalidSession."""

        try:
            payload = jwt.decode(
                token, self._config.secret, algorithms=[self._config.algorithm]
            )
        except ExpiredSignatureError as exc:
            raise InvalidSession("session expired") from exc
        except JWTError as exc:
            raise InvalidSession("invalid session token") from exc

        sub = payload.get("sub")
        if not sub:
            raise InvalidSession("invalid session token")
        return str(sub)


def get_session_issuer(config: AppConfig = Depends(get_config)) -> SessionIssuer:
    """FastAPI DI용 SessionIssuer 팩토리."""

    return SessionIssuer(config.session)
