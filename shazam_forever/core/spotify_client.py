"""Spotify API client via Spotipy; client-credentials search for track links."""
import logging
from typing import Optional

from spotipy import Spotify
from spotipy.oauth2 import SpotifyClientCredentials

from shazam_forever.config import SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET

logger = logging.getLogger(__name__)

_spotify_client: Optional[Spotify] = None


def get_spotify_client() -> Optional[Spotify]:
    """Return a Spotipy client using app credentials, or None if not configured."""
    global _spotify_client
    if not SPOTIFY_CLIENT_ID or not SPOTIFY_CLIENT_SECRET:
        return None
    if _spotify_client is None:
        auth = SpotifyClientCredentials(
            client_id=SPOTIFY_CLIENT_ID,
            client_secret=SPOTIFY_CLIENT_SECRET,
        )
        _spotify_client = Spotify(auth_manager=auth, requests_timeout=5)
    return _spotify_client


def _escape(value: str) -> str:
    return value.replace('"', "")


def find_track_uri(title: str, artist: str, sp: Optional[Spotify] = None) -> Optional[str]:
    """Return the spotify:track URI of the best search hit for title/artist, or None."""
    if not title or not artist:
        return None
    sp = sp if sp is not None else get_spotify_client()
    if sp is None:
        return None
    query = f'track:"{_escape(title)}" artist:"{_escape(artist)}"'
    try:
        result = sp.search(q=query, type="track", limit=1)
    except Exception as e:
        logger.warning("Spotify search failed: %s", e)
        return None
    items = ((result or {}).get("tracks") or {}).get("items") or []
    if not items:
        return None
    return items[0].get("uri")
