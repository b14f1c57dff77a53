"""Exceptions raised by the parser and the playback path."""


class TabseqError(Exception):
    """Base class for every recoverable tabseq failure."""


class NoteParseError(TabseqError, ValueError):
    def __init__(self, name, reason):
        super().__init__(f"cannot parse note {name!r}: {reason}")
        self.name = name


class PhraseError(TabseqError, ValueError):
    """A phrase entry is not a ``(note name, positive duration)`` pair."""

    def __init__(self, entry, reason):
        super().__init__(f"bad phrase entry {entry!r}: {reason}")
        self.entry = entry


class PlaybackError(TabseqError):
    """A phrase could not be played; ``stage`` says where it stopped."""

    stage = "playback"


class DeviceUnavailable(PlaybackError):
    stage = "open"


class DeviceWriteError(PlaybackError):
    stage = "write"
