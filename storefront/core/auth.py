"""Bearer-token authentication for FastAPI using the auth service's JWKS."""

import asyncio
from typing import Annotated, Any

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient, PyJWKClientError

from storefront.core.config import Settings

# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)


class TokenVerifier:
    """Verifies RS256 tokens issued by the auth service.

    One instance is built per application and kept on ``app.state``; the JWKS
    client is created lazily and dropped when the key endpoint fails so the
    next request retries with a fresh client.
    """

    def __init__(self, settings: Settings) -> None:
        self.jwks_url = settings.jwks_url
        self.audience = settings.token_audience
        self.issuer = settings.auth_url
        self._jwks_client: PyJWKClient | None = None
        self._lock = asyncio.Lock()

    def get_jwks_client(self) -> PyJWKClient:
        """Get or create JWKS client."""
        if self._jwks_client is None:
            self._jwks_client = PyJWKClient(self.jwks_url, cache_keys=True)
        return self._jwks_client

    async def verify(self, token: str) -> dict[str, Any]:
        """Verify a bearer token and return its decoded payload.

        Raises:
            HTTPException: 401 if the token is invalid or expired, 503 if the
                signing keys cannot be fetched.
        """
        try:
            signing_key = self.get_jwks_client().get_signing_key_from_jwt(token)

            payload: dict[str, Any] = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "verify_exp": True,
                    "verify_iat": True,
                    "verify_aud": True,
                    "verify_iss": True,
                },
            )
        except jwt.ExpiredSignatureError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"},
            )
        except jwt.InvalidTokenError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid token: {str(e)}",
                headers={"WWW-Authenticate": "Bearer"},
            )
        except PyJWKClientError as e:
            async with self._lock:
                self._jwks_client = None
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Authentication service unavailable. Unable to verify token: {str(e)}",
            )

        if not payload.get("sub"):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token: missing subject",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return payload


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """Get current authenticated user from the bearer token.

    Returns:
        The decoded token payload; ``sub`` is the caller's user id.

    Raises:
        HTTPException: If no token provided or token is invalid
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    verifier: TokenVerifier = request.app.state.token_verifier
    return await verifier.verify(credentials.credentials)


def get_user_id(user: dict[str, Any]) -> str:
    """Extract the caller's user id (which is also their store id)."""
    return str(user["sub"])


# Type alias for dependency injection
CurrentUser = Annotated[dict[str, Any], Depends(get_current_user)]
