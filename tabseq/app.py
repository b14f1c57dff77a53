#!/usr/bin/env python3
"""
Terminal sequencer shell
Requirements: pip install mido python-rtmidi blessed
"""

import logging
import os
from pathlib import Path

from blessed import Terminal

from tabseq import view
from tabseq.config import Config
from tabseq.dispatch import Dispatcher, Effect, KeyEvent, KeyKind
from tabseq.errors import TabseqError
from tabseq.playback import Sequencer, open_output, play_phrase
from tabseq.state import AppState, Navigator

log = logging.getLogger(__name__)

LOG_DIR = Path.home() / ".tabseq"


class TabSeq:
    def __init__(self, config=None, term=None, sequencer=None, opener=open_output):
        self.config = config or Config()
        self.term = term if term is not None else Terminal()
        self.state = AppState()
        self.status = ""
        self.dispatcher = Dispatcher(
            Navigator(self.config.track_count), self.config.keymap
        )
        self.sequencer = sequencer or Sequencer(
            step=self.config.step,
            settle=self.config.settle,
            velocity=self.config.velocity,
        )
        self.opener = opener

    # ── input ────────────────────────────────────────────────

    def read_event(self):
        """Block for the next keystroke and wrap it as a KeyEvent.

        blessed only reports presses; an empty keystroke yields None.
        """
        key = self.term.inkey(timeout=None)
        if not key:
            return None
        if key.is_sequence and key.name:
            return KeyEvent(key.name)
        return KeyEvent(str(key))

    def handle(self, event):
        self.state, effect = self.dispatcher.reduce(self.state, event)
        if effect is Effect.PLAY:
            self.play()

    # ── effects ──────────────────────────────────────────────

    def play(self):
        """Play the configured phrase; a failure never leaves the loop."""
        try:
            play_phrase(
                self.config.phrase,
                self.sequencer,
                port_name=self.config.port_name,
                opener=self.opener,
            )
        except TabseqError as e:
            log.warning("playback failed (%s): %s", getattr(e, "stage", "parse"), e)
            self.status = f"ERROR: {e}"
        else:
            self.status = ""

    # ── main loop ────────────────────────────────────────────

    def draw(self):
        view.draw(self.term, self.state, self.config, self.status)

    def loop(self):
        self.draw()
        while not self.state.exited:
            event = self.read_event()
            if event is None or event.kind is not KeyKind.PRESS:
                continue
            self.handle(event)
            self.draw()
        log.info("exiting on tab %d, track %d", self.state.tab, self.state.track)

    def run(self):
        t = self.term
        with t.fullscreen(), t.cbreak(), t.hidden_cursor():
            self.loop()


def setup_logging():
    """Log to ~/.tabseq/tabseq.log; the fullscreen terminal owns stdout."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(LOG_DIR / "tabseq.log"),
        level=os.environ.get("TABSEQ_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )


def main():
    setup_logging()
    app = TabSeq(Config.from_env())
    app.run()


if __name__ == "__main__":
    main()
