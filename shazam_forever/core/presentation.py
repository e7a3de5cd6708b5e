"""Dashboard text for the glasses: a short main summary and an expanded view."""
from datetime import datetime
from typing import Optional, Protocol, Tuple

from shazam_forever.config import APP_TITLE
from shazam_forever.models.song import SongMatch

LISTENING_TEXT = "Listening for music..."
PAUSED_TEXT = "⏸️ Paused"
IDLE_EXPANDED_TEXT = (
    f"🎵 {APP_TITLE}\n\nNo song currently playing\n\nListening for music in your environment..."
)
SPOTIFY_NOTE = "🎧 Available on Spotify"


class Dashboard(Protocol):
    def write_to_main(self, text: str) -> None:
        pass

    def write_to_expanded(self, text: str) -> None:
        pass


def format_time(ts: datetime) -> str:
    """12-hour clock time, e.g. 3:04:05 PM."""
    hour = ts.hour % 12 or 12
    return f"{hour}:{ts:%M:%S} {'AM' if ts.hour < 12 else 'PM'}"


def now_playing_texts(song: SongMatch) -> Tuple[str, str]:
    album = song.album or "Unknown"
    main = f"Now Playing\n{song.title}\nby {song.artist}\nAlbum: {album}"
    note = SPOTIFY_NOTE if song.external_playback_uri else ""
    expanded = (
        f"Now Playing\n{song.title}\nby {song.artist}\n\n"
        f"Album: {album}\nTime: {format_time(song.identified_at)}\n\n{note}"
    )
    return main, expanded


def status_texts(current_song: Optional[SongMatch], is_listening: bool) -> Tuple[str, str]:
    """(main, expanded) for the current state."""
    if current_song is not None:
        return now_playing_texts(current_song)
    return (LISTENING_TEXT if is_listening else PAUSED_TEXT), IDLE_EXPANDED_TEXT


class PresentationAdapter:
    """Writes status texts to a dashboard; remembers the last texts written."""

    def __init__(self, dashboard: Dashboard) -> None:
        self._dashboard = dashboard
        self.main_text: Optional[str] = None
        self.expanded_text: Optional[str] = None

    def render(self, current_song: Optional[SongMatch], is_listening: bool) -> None:
        main, expanded = status_texts(current_song, is_listening)
        self._dashboard.write_to_main(main)
        self._dashboard.write_to_expanded(expanded)
        self.main_text = main
        self.expanded_text = expanded
