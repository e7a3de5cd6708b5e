"""Song identified by the recognition service."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_ARTIST = "Unknown Artist"


@dataclass(frozen=True)
class SongMatch:
    """A successful recognition. identified_at is when recognition succeeded, not when audio was captured."""
    title: str
    artist: str
    identified_at: datetime
    album: Optional[str] = None
    cover_art_url: Optional[str] = None
    background_url: Optional[str] = None
    external_playback_uri: Optional[str] = None
    # spotify:track URI found by search when Shazam gave no deep link
    spotify_track_uri: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "cover_art_url": self.cover_art_url,
            "background_url": self.background_url,
            "external_playback_uri": self.external_playback_uri,
            "spotify_track_uri": self.spotify_track_uri,
            "identified_at": self.identified_at.isoformat(),
        }
