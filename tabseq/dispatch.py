"""Key classification and the pure state transition for one input event."""

from dataclasses import dataclass, replace
from enum import Enum

from tabseq.config import Keymap
from tabseq.state import Navigator


class KeyKind(Enum):
    PRESS = "press"
    REPEAT = "repeat"
    RELEASE = "release"


@dataclass(frozen=True)
class KeyEvent:
    key: str
    kind: KeyKind = KeyKind.PRESS


class Action(Enum):
    SELECT_TAB = "select_tab"
    TRACK_LEFT = "track_left"
    TRACK_RIGHT = "track_right"
    PLAY = "play"
    QUIT = "quit"
    IGNORE = "ignore"


class Effect(Enum):
    PLAY = "play"


class Dispatcher:
    def __init__(self, navigator=None, keymap=None):
        self.navigator = navigator or Navigator()
        self.keymap = keymap or Keymap()

    def classify(self, event):
        """Map a press event to an Action; anything but a press gives None."""
        if event.kind is not KeyKind.PRESS:
            return None
        key = event.key
        km = self.keymap
        if key in km.tabs:
            return Action.SELECT_TAB
        if key in km.track_left:
            return Action.TRACK_LEFT
        if key in km.track_right:
            return Action.TRACK_RIGHT
        if key in km.play:
            return Action.PLAY
        if key in km.quit:
            return Action.QUIT
        return Action.IGNORE

    def reduce(self, state, event):
        """Return ``(new_state, effect)`` for one event without doing any IO."""
        if state.exited:
            return state, None

        action = self.classify(event)
        if action is Action.SELECT_TAB:
            return self.navigator.select_tab(state, self.keymap.tabs.index(event.key)), None
        if action is Action.TRACK_LEFT:
            return self.navigator.move_track(state, -1), None
        if action is Action.TRACK_RIGHT:
            return self.navigator.move_track(state, +1), None
        if action is Action.PLAY:
            return state, Effect.PLAY
        if action is Action.QUIT:
            return replace(state, exited=True), None
        return state, None
