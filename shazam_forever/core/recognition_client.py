"""Song recognition via shazamio. Fails soft: every error becomes "no match"."""
import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Optional

from shazamio import Shazam

from shazam_forever.config import AUDIO_SAMPLE_RATE, RECOGNITION_TIMEOUT_SEC
from shazam_forever.core.sample_converter import to_pcm16, to_wav_bytes
from shazam_forever.core.spotify_client import find_track_uri
from shazam_forever.models.song import UNKNOWN_ARTIST, UNKNOWN_TITLE, SongMatch

logger = logging.getLogger(__name__)

SPOTIFY_PROVIDER = "SPOTIFY"
SPOTIFY_DEEPLINK_ACTION = "hub:spotify:searchdeeplink"

LinkLookup = Callable[[str, str], Optional[str]]


def extract_album(track: dict) -> Optional[str]:
    """Caption of the second metapage in the first section, if present."""
    sections = track.get("sections") or []
    if not sections:
        return None
    metapages = (sections[0] or {}).get("metapages") or []
    if len(metapages) < 2:
        return None
    return (metapages[1] or {}).get("caption") or None


def extract_spotify_uri(track: dict) -> Optional[str]:
    """URI of the Spotify search deep link in the track's hub providers, if any."""
    providers = (track.get("hub") or {}).get("providers") or []
    for provider in providers:
        if provider.get("type") != SPOTIFY_PROVIDER:
            continue
        for action in provider.get("actions") or []:
            if action.get("name") == SPOTIFY_DEEPLINK_ACTION:
                return action.get("uri")
    return None


def track_to_song(track: dict, identified_at: datetime) -> SongMatch:
    """Map a Shazam track payload to a SongMatch."""
    images = track.get("images") or {}
    return SongMatch(
        title=track.get("title") or UNKNOWN_TITLE,
        artist=track.get("subtitle") or UNKNOWN_ARTIST,
        album=extract_album(track),
        cover_art_url=images.get("coverart"),
        background_url=images.get("background"),
        external_playback_uri=extract_spotify_uri(track),
        identified_at=identified_at,
    )


class RecognitionClient:
    """Wraps the Shazam recognizer. Stateless per call."""

    def __init__(
        self,
        shazam: Any = None,
        *,
        sample_rate: int = AUDIO_SAMPLE_RATE,
        timeout_sec: Optional[float] = RECOGNITION_TIMEOUT_SEC,
        link_lookup: Optional[LinkLookup] = find_track_uri,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._shazam = shazam if shazam is not None else Shazam()
        self._sample_rate = sample_rate
        self._timeout_sec = timeout_sec
        self._link_lookup = link_lookup
        self._clock = clock

    async def recognize(self, samples) -> Optional[SongMatch]:
        """Identify the song in normalized float samples. Returns None on no match or any error."""
        try:
            wav_bytes = to_wav_bytes(to_pcm16(samples), self._sample_rate)
            logger.info("Sending %d samples to Shazam for identification", len(samples))
            result = await asyncio.wait_for(
                self._shazam.recognize(wav_bytes), timeout=self._timeout_sec
            )
        except asyncio.TimeoutError:
            logger.warning("Shazam did not answer within %.1fs", self._timeout_sec)
            return None
        except Exception as e:
            logger.warning("Error identifying song: %s", e)
            return None

        track = (result or {}).get("track")
        if not track:
            logger.info("No song identified")
            return None

        try:
            song = track_to_song(track, self._clock())
        except (AttributeError, TypeError) as e:
            logger.warning("Unexpected Shazam track payload: %s", e)
            return None
        if song.external_playback_uri is None and self._link_lookup is not None:
            song = await self._with_spotify_track(song)
        logger.info("Song identified: %s by %s", song.title, song.artist)
        return song

    async def _with_spotify_track(self, song: SongMatch) -> SongMatch:
        """Attach a searched Spotify track URI. external_playback_uri stays as Shazam reported it."""
        try:
            uri = await asyncio.to_thread(self._link_lookup, song.title, song.artist)
        except Exception as e:
            logger.warning("Spotify link lookup failed: %s", e)
            return song
        if not uri:
            return song
        return replace(song, spotify_track_uri=uri)
