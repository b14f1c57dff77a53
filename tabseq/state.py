from dataclasses import dataclass, replace
from enum import IntEnum

from tabseq.config import TRACK_COUNT


class Tab(IntEnum):
    TRACKS = 0
    COMPOSITION = 1
    PREVIEW = 2


@dataclass(frozen=True)
class AppState:
    tab: Tab = Tab.TRACKS
    track: int = 0
    exited: bool = False


class Navigator:
    """Tab and track movement over an immutable AppState."""

    def __init__(self, track_count=TRACK_COUNT):
        if track_count < 1:
            raise ValueError("track_count must be at least 1")
        self.track_count = track_count

    def select_tab(self, state, index):
        return replace(state, tab=Tab(index))

    def move_track(self, state, delta):
        # add track_count first so a -1 step never takes a negative modulo
        track = (state.track + delta + self.track_count) % self.track_count
        return replace(state, track=track)
