# paes_app/services/auth.py
# Bearer 토큰 검증만 한다 (발급은 인증 서비스 소관)
import logging
from typing import Dict

from jose import JWTError, jwt

logger = logging.getLogger(__name__)


def verify_bearer(authorization: str | None, secret: str, algorithm: str = "HS256") -> Dict[str, object]:
    """
    - Authorization: Bearer <access_token> 헤더에서 토큰을 꺼내서
    - JWT secret 으로 검증하고
    - user_id(int), email 을 반환한다.
    """
    if not secret:
        raise ValueError("JWT_SECRET is not configured")

    if not authorization:
        raise ValueError("missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise ValueError("invalid Authorization header")

    token = parts[1].strip()
    if not token:
        raise ValueError("invalid Authorization header")

    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={
                "verify_aud": False,
                "verify_iss": False,
            },
        )
    except JWTError as e:
        logger.info("JWT decode failed: %s", e)
        raise ValueError("invalid token") from e

    # 로그인 서비스는 {id, email, ...} 를 넣는다. sub 도 허용
    raw_id = claims.get("id", claims.get("sub"))
    try:
        user_id = int(raw_id)
    except (TypeError, ValueError):
        raise ValueError("invalid token: missing user id") from None

    return {
        "user_id": user_id,
        "email": claims.get("email"),
    }
