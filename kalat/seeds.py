"""Fixed seed content: stored on first server start, shown by clients when offline."""

from typing import NamedTuple


class SeedFragment(NamedTuple):
    type: str
    label: str
    source: str
    detail: str | None = None
    # Stable id used by the client fallback set; the server derives its UUID from it.
    fallback_id: str = ""


SEED_FRAGMENTS: tuple[SeedFragment, ...] = (
    SeedFragment(
        type="voice",
        label="VM #1",
        source=(
            "https://cdn.pixabay.com/download/audio/2022/03/15/"
            "audio_e176cb74f2.mp3?filename=calm-notes-21673.mp3"
        ),
        detail="Morning riff sent last month.",
        fallback_id="vm-1",
    ),
    SeedFragment(
        type="photo",
        label="Snap 02",
        source=(
            "https://images.unsplash.com/photo-1503023345310-bd7c1de61c7d"
            "?auto=format&fit=crop&w=600&q=80"
        ),
        detail="Neutral city walk shot.",
        fallback_id="photo-2",
    ),
    SeedFragment(
        type="quote",
        label="Quote 04",
        source='"I keep plans loose so the day can surprise me."',
        fallback_id="quote-4",
    ),
    SeedFragment(
        type="fact",
        label="Fact #6",
        source="Prefers playlists sorted by weather instead of genre.",
        fallback_id="fact-6",
    ),
)
