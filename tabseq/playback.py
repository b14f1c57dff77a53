"""
Timed phrase playback to a MIDI output.

A Sequencer writes note-on / note-off pairs to anything with a ``send``
method; ``play_phrase`` opens a mido output for the length of one phrase.
Requirements: pip install mido python-rtmidi
"""

import logging
import time
from dataclasses import dataclass

import mido

from tabseq.config import NOTE_OFF, NOTE_ON, SETTLE_SECONDS, STEP_SECONDS, VELOCITY
from tabseq.errors import DeviceUnavailable, DeviceWriteError, PhraseError
from tabseq.pitch import parse_note

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoteEvent:
    pitch: int
    duration: float

    def __post_init__(self):
        if not 0 <= self.pitch <= 127:
            raise ValueError(f"pitch {self.pitch} outside 0-127")
        if not 0 < self.duration < float("inf"):
            raise ValueError(f"duration must be positive and finite, got {self.duration}")


def resolve_phrase(entries):
    """Turn ``(note name, duration)`` pairs into a tuple of NoteEvents."""
    events = []
    for item in entries:
        if isinstance(item, NoteEvent):
            events.append(item)
            continue
        if isinstance(item, str):
            raise PhraseError(item, "expected (note name, duration)")
        try:
            name, duration = item
        except (TypeError, ValueError) as e:
            raise PhraseError(item, "expected (note name, duration)") from e
        pitch = parse_note(name)
        try:
            events.append(NoteEvent(pitch, duration))
        except (TypeError, ValueError) as e:
            raise PhraseError(item, e) from e
    return tuple(events)


class Sequencer:
    def __init__(self, step=STEP_SECONDS, settle=SETTLE_SECONDS,
                 velocity=VELOCITY, sleep=time.sleep):
        if not 0 <= velocity <= 127:
            raise ValueError(f"velocity {velocity} outside 0-127")
        if step < 0 or settle < 0:
            raise ValueError("step and settle must not be negative")
        self.step = step
        self.settle = settle
        self.velocity = velocity
        self.sleep = sleep

    def _send(self, sink, status, pitch):
        msg = mido.Message.from_bytes([status, pitch, self.velocity])
        try:
            sink.send(msg)
        except Exception as e:
            raise DeviceWriteError(f"failed to send {msg.type} {pitch}: {e}") from e

    def play(self, sink, phrase):
        """Play every event in order, blocking until the phrase is done.

        Returns the number of messages written. A failed write aborts the
        rest of the phrase; the note that was sounding is left hanging.
        """
        writes = 0
        for event in phrase:
            log.debug("note %d for %s steps", event.pitch, event.duration)
            self._send(sink, NOTE_ON, event.pitch)
            writes += 1
            self.sleep(event.duration * self.step)
            self._send(sink, NOTE_OFF, event.pitch)
            writes += 1
        self.sleep(self.settle)
        return writes


def open_output(port_name=None):
    """Open ``port_name``, or the first available output when it is None."""
    try:
        available = mido.get_output_names()
    except Exception as e:
        raise DeviceUnavailable(f"cannot list MIDI outputs: {e}") from e

    if not available:
        raise DeviceUnavailable("No MIDI output ports found")
    if port_name is None:
        port_name = available[0]
    elif port_name not in available:
        raise DeviceUnavailable(f"MIDI output {port_name!r} not found")

    try:
        return mido.open_output(port_name)
    except Exception as e:
        raise DeviceUnavailable(f"Failed to open MIDI port {port_name}: {e}") from e


def play_phrase(entries, sequencer, port_name=None, opener=open_output):
    """Resolve a phrase, then play it on a freshly opened output port."""
    phrase = resolve_phrase(entries)
    port = opener(port_name)
    log.info("playing %d notes on %s", len(phrase), getattr(port, "name", port))
    try:
        return sequencer.play(port, phrase)
    finally:
        port.close()
