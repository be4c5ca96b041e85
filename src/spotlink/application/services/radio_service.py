"""RadioService: recommended tracks for a seed via the session's message bus.

Hey future me - radio is a two-hop lookup that does NOT go through the Web API:
1. hm://autoplay-enabled/query?uri=<seed>   -> body is the station URI (plain text)
2. hm://radio-apollo/v3/stations/<station>  -> body is JSON {"tracks": [{"original_gid"}]}
Only then do we hit the Web API (batch track lookup) to get real track data.

Both hops are strictly sequential. A failure at either hop fails the call, there is
no "empty radio" fallback.
"""

import logging

from pydantic import ValidationError as PydanticValidationError

from spotlink.domain.entities import Track
from spotlink.domain.exceptions import (
    DecodeError,
    TransportError,
    UpstreamStatusError,
    ValidationError,
)
from spotlink.domain.ports import ISession
from spotlink.domain.value_objects import TrackId
from spotlink.infrastructure.integrations.converters import try_track_from_full
from spotlink.infrastructure.integrations.spotify_client import SpotifyApiClient
from spotlink.infrastructure.integrations.spotify_models import RadioStationResponse
from spotlink.infrastructure.integrations.token_source import TokenSource

logger = logging.getLogger(__name__)

AUTOPLAY_QUERY_URI = "hm://autoplay-enabled/query?uri={seed_uri}"
RADIO_STATION_URI = "hm://radio-apollo/v3/stations/{station_uri}"


class RadioService:
    """Resolves radio seeds (track/artist/playlist URIs) into playable tracks."""

    def __init__(self, token_source: TokenSource, api: SpotifyApiClient) -> None:
        self._token_source = token_source
        self._api = api

    async def radio_tracks(self, seed_uri: str) -> list[Track]:
        """Get the radio tracks for a seed URI.

        Args:
            seed_uri: Spotify URI of the seed, e.g. "spotify:track:<id>"

        Returns:
            Converted tracks in station order; ids that don't parse are skipped

        Raises:
            TransportError: If a message-bus request fails
            UpstreamStatusError: If either hop answers with a non-200 status
            DecodeError: If a hop's payload is missing or undecodable
        """
        session = await self._token_source.session()

        autoplay_uri = AUTOPLAY_QUERY_URI.format(seed_uri=seed_uri)
        body = await self._mercury_get(session, autoplay_uri, "autoplay URI")
        try:
            station_uri = body.decode("utf-8").strip()
        except UnicodeDecodeError as e:
            raise DecodeError(
                f"Failed to get autoplay URI: payload is not UTF-8 ({e})",
                endpoint=autoplay_uri,
            ) from e
        logger.debug(f"Radio station for {seed_uri}: {station_uri}")

        station_endpoint = RADIO_STATION_URI.format(station_uri=station_uri)
        body = await self._mercury_get(
            session, station_endpoint, f"radio data of {station_uri}"
        )
        try:
            station = RadioStationResponse.model_validate_json(body)
        except PydanticValidationError as e:
            raise DecodeError(
                f"Failed to decode radio data of {station_uri}: {e}",
                endpoint=station_endpoint,
            ) from e

        track_ids: list[TrackId] = []
        for track in station.tracks:
            try:
                track_ids.append(TrackId.from_id(track.original_gid))
            except ValidationError:
                logger.debug(f"Skipping radio track with invalid id {track.original_gid!r}")

        tracks = await self._api.get_tracks(track_ids)
        return [t for t in map(try_track_from_full, tracks) if t is not None]

    async def _mercury_get(self, session: ISession, uri: str, what: str) -> bytes:
        """One message-bus GET, returning the first payload block."""
        try:
            response = await session.mercury_get(uri)
        except Exception as e:
            # the session is an external collaborator, its errors are not ours to type
            raise TransportError(
                f"Failed to get {what}: message-bus request failed: {e}",
                endpoint=uri,
            ) from e

        if response.status_code != 200:
            raise UpstreamStatusError(
                response.status_code,
                uri,
                message=(
                    f"Failed to get {what}: got non-OK status code: "
                    f"{response.status_code}"
                ),
            )
        if not response.payload:
            raise DecodeError(f"Failed to get {what}: empty payload", endpoint=uri)
        return response.payload[0]
