import logging
from typing import Any, Dict, Optional, Protocol
import httpx
from .schemas import AuthUser, Session, SignInResult, SignUpResult

logger = logging.getLogger(__name__)

SIGNUP_FAILED = "An error occurred during signup"
LOGIN_FAILED = "An error occurred during login"


class AuthProvider(Protocol):
    async def sign_up(self, email: str, password: str, display_name: str) -> SignUpResult: ...

    async def sign_in(self, email: str, password: str) -> SignInResult: ...

    async def get_session(self, access_token: Optional[str]) -> Optional[Session]: ...

    async def sign_out(self, access_token: str) -> Optional[str]: ...


def _error_message(response: httpx.Response) -> str:
    """Pull the human-readable message out of a GoTrue error body"""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"Authentication request failed ({response.status_code})"


def _parse_user(data: Dict[str, Any]) -> AuthUser:
    metadata = data.get("user_metadata") or {}
    return AuthUser(
        id=data["id"],
        email=data.get("email") or "",
        display_name=metadata.get("full_name") or "",
    )


def _session_from(user: AuthUser, access_token: str) -> Session:
    return Session(
        owner_id=user.id,
        email=user.email,
        display_name=user.display_name,
        access_token=access_token,
    )


class SupabaseAuth:
    """Client for the Supabase GoTrue REST API"""

    def __init__(
        self,
        url: str,
        anon_key: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.base_url = f"{url.rstrip('/')}/auth/v1"
        self.anon_key = anon_key
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token or self.anon_key}",
        }

    async def sign_up(self, email: str, password: str, display_name: str) -> SignUpResult:
        payload = {
            "email": email,
            "password": password,
            "data": {"full_name": display_name},
        }
        try:
            response = await self._client.post(
                f"{self.base_url}/signup", json=payload, headers=self._headers()
            )
        except httpx.HTTPError as e:
            logger.error("Signup request failed: %s", e)
            return SignUpResult(error=SIGNUP_FAILED)

        if response.is_error:
            return SignUpResult(error=_error_message(response))

        try:
            body = response.json()
            # With email confirmation on, GoTrue returns the bare user and no session
            if "access_token" in body:
                user = _parse_user(body["user"])
                return SignUpResult(user=user, session=_session_from(user, body["access_token"]))
            if body.get("id"):
                return SignUpResult(user=_parse_user(body))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Unexpected signup response: %s", e)
            return SignUpResult(error=SIGNUP_FAILED)
        return SignUpResult()

    async def sign_in(self, email: str, password: str) -> SignInResult:
        try:
            response = await self._client.post(
                f"{self.base_url}/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.error("Login request failed: %s", e)
            return SignInResult(error=LOGIN_FAILED)

        if response.is_error:
            return SignInResult(error=_error_message(response))

        try:
            body = response.json()
            user = _parse_user(body["user"])
            session = _session_from(user, body["access_token"])
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Unexpected login response: %s", e)
            return SignInResult(error=LOGIN_FAILED)
        return SignInResult(session=session)

    async def get_session(self, access_token: Optional[str]) -> Optional[Session]:
        """Resolve an access token to its session; any failure means no session"""
        if not access_token:
            return None
        try:
            response = await self._client.get(
                f"{self.base_url}/user", headers=self._headers(access_token)
            )
        except httpx.HTTPError as e:
            logger.warning("Session lookup failed: %s", e)
            return None

        if response.is_error:
            logger.debug("Session rejected: %s", response.status_code)
            return None
        try:
            return _session_from(_parse_user(response.json()), access_token)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Unexpected session response: %s", e)
            return None

    async def sign_out(self, access_token: str) -> Optional[str]:
        """End the session; returns an error message on failure"""
        try:
            response = await self._client.post(
                f"{self.base_url}/logout", headers=self._headers(access_token)
            )
        except httpx.HTTPError as e:
            logger.error("Logout request failed: %s", e)
            return str(e)

        if response.is_error:
            return _error_message(response)
        return None

    async def aclose(self):
        await self._client.aclose()
