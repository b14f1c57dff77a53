"""
Named settings for the sequencer shell.

Everything the loop, the navigator and the sequencer need is collected in
one Config so nothing is re-declared at a call site.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

TRACK_COUNT = 6
TAB_NAMES = ("Tracks", "Composition", "Preview")

# (note name, duration in steps)
REFERENCE_PHRASE = (
    ("C4", 2),
    ("E4", 1),
    ("G4", 1),
    ("D#5", 2),
    ("Bb3", 4),
)

STEP_SECONDS = 0.150
SETTLE_SECONDS = 0.150

NOTE_ON = 0x90
NOTE_OFF = 0x80
VELOCITY = 0x64

PORT_ENV = "TABSEQ_MIDI_PORT"


@dataclass(frozen=True)
class Keymap:
    tabs: Tuple[str, ...] = ("!", "@", "#")
    track_left: Tuple[str, ...] = ("h", "H", "KEY_LEFT")
    track_right: Tuple[str, ...] = ("l", "L", "KEY_RIGHT")
    play: Tuple[str, ...] = (" ", "p", "P")
    quit: Tuple[str, ...] = ("q", "Q")

    def __post_init__(self):
        if len(self.tabs) != len(TAB_NAMES):
            raise ValueError(f"need one tab key per tab, got {self.tabs!r}")


@dataclass(frozen=True)
class Config:
    track_count: int = TRACK_COUNT
    phrase: tuple = REFERENCE_PHRASE
    step: float = STEP_SECONDS
    settle: float = SETTLE_SECONDS
    velocity: int = VELOCITY
    port_name: Optional[str] = None
    keymap: Keymap = field(default_factory=Keymap)

    @classmethod
    def from_env(cls, environ=None):
        """Build a Config, taking the output port name from the environment."""
        environ = os.environ if environ is None else environ
        return cls(port_name=environ.get(PORT_ENV) or None)
