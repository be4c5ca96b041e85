"""Session holder and bearer token source.

Hey future me - this is the ONLY shared mutable thing in spotlink: the active session.
Token requests, radio lookups and re-auth all go through one asyncio.Lock, so the
four concurrent search branches never see a session that is halfway replaced.
is_invalid() is the one lock-free read: a sync peek at the held session, only
used to decide whether ensure_valid() has work to do.

Token flow:
1. current_token() returns the remembered token if it has > 60s left
2. otherwise asks the session's token provider (client id + scopes)
3. a session swap in ensure_valid() forgets the remembered token

Callers must call current_token() again after a refresh. Never stash the string.
"""

import asyncio
import logging
import time

from pydantic import ValidationError as PydanticValidationError

from spotlink.config.settings import LoginCredentials, Settings
from spotlink.domain.exceptions import AuthError
from spotlink.domain.ports import AccessToken, Credentials, ISession, ISessionFactory

logger = logging.getLogger(__name__)

SCOPES = [
    "user-read-recently-played",
    "user-top-read",
    "user-read-playback-position",
    "user-read-playback-state",
    "user-modify-playback-state",
    "user-read-currently-playing",
    "streaming",
    "playlist-read-private",
    "playlist-modify-private",
    "playlist-modify-public",
    "playlist-read-collaborative",
    "user-follow-read",
    "user-follow-modify",
    "user-library-read",
    "user-library-modify",
]

# Refresh a bit early so a token never expires mid-pagination
TOKEN_EXPIRY_MARGIN_SECONDS = 60


def resolve_credentials(settings: Settings) -> Credentials:
    """Stored credentials first, then SPOTIFY_USERNAME / SPOTIFY_PASSWORD.

    Raises:
        AuthError: If neither source provides a login pair
    """
    if settings.login is not None:
        return settings.login.to_credentials()
    try:
        return LoginCredentials().to_credentials()  # type: ignore[call-arg]
    except PydanticValidationError as e:
        raise AuthError(
            "No login credentials available: set them in settings or via "
            "SPOTIFY_USERNAME / SPOTIFY_PASSWORD"
        ) from e


async def connect_session(
    factory: ISessionFactory, settings: Settings
) -> ISession:
    """Open a new session with resolved credentials.

    Raises:
        AuthError: If credentials are missing or the factory rejects them
    """
    credentials = resolve_credentials(settings)
    try:
        session = await factory.connect(settings.app.session_config(), credentials)
    except Exception as e:
        # the factory is an external collaborator, its errors are not ours to type
        raise AuthError(f"Failed to authenticate: {e}") from e
    logger.info(f"Successfully authenticated as {credentials.username}")
    return session


class TokenSource:
    """Authoritative holder of the active session."""

    def __init__(
        self,
        session: ISession,
        session_factory: ISessionFactory,
        settings: Settings,
    ) -> None:
        self._session = session
        self._factory = session_factory
        self._settings = settings
        self._lock = asyncio.Lock()
        self._token: AccessToken | None = None
        self._token_expires_at = 0.0

    def is_invalid(self) -> bool:
        """True if the held session was dropped.

        Lock-free peek; ensure_valid() re-checks under the lock before swapping.
        """
        return self._session.is_invalid()

    async def session(self) -> ISession:
        """The current session (waits for an in-flight refresh)."""
        async with self._lock:
            return self._session

    async def ensure_valid(self) -> None:
        """Replace the session if it became invalid. No-op when valid.

        Raises:
            AuthError: If a new session cannot be created
        """
        async with self._lock:
            if not self._session.is_invalid():
                return
            logger.info("Client's current session is invalid, creating a new session...")
            self._session = await connect_session(self._factory, self._settings)
            self._token = None
            self._token_expires_at = 0.0
            logger.info("Used a new session for Spotify client.")

    async def current_token(self) -> str:
        """Bearer token for the Web API.

        Raises:
            AuthError: If the session cannot issue a token
        """
        async with self._lock:
            if self._token is not None and time.monotonic() < self._token_expires_at:
                return self._token.access_token

            try:
                token = await self._session.get_token(
                    self._settings.app.client_id, ",".join(SCOPES)
                )
            except Exception as e:
                raise AuthError(f"Failed to get access token: {e}") from e
            if not token.access_token:
                raise AuthError("Session returned an empty access token")

            self._token = token
            self._token_expires_at = time.monotonic() + max(
                token.expires_in - TOKEN_EXPIRY_MARGIN_SECONDS, 0
            )
            logger.debug(f"Obtained new access token (expires in {token.expires_in}s)")
            return token.access_token
