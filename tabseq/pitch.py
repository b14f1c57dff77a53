"""Conversion between note names and MIDI pitch numbers."""

from tabseq.errors import NoteParseError

NOTE_BASES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
ACCIDENTALS = {"#": 1, "b": -1}
DIGITS = "0123456789"


def parse_note(name):
    """Convert a note name such as ``"D#5"`` or ``"Bb3"`` to a MIDI number.

    The letter is case-insensitive, the accidental is ``#`` or ``b`` and the
    octave is a single digit, so ``"C4"`` is 60. Parsing stops after the
    octave digit. Raises NoteParseError for a bad letter, a missing octave
    or a result outside 0-127.
    """
    if not isinstance(name, str) or not name:
        raise NoteParseError(name, "empty note name")

    base = NOTE_BASES.get(name[0].upper())
    if base is None:
        raise NoteParseError(name, f"unknown note letter {name[0]!r}")

    pos = 1
    accidental = 0
    if pos < len(name) and name[pos] in ACCIDENTALS:
        accidental = ACCIDENTALS[name[pos]]
        pos += 1

    if pos >= len(name) or name[pos] not in DIGITS:
        raise NoteParseError(name, "missing octave digit")
    octave = int(name[pos])

    pitch = base + (octave + 1) * 12 + accidental
    if not 0 <= pitch <= 127:
        raise NoteParseError(name, f"pitch {pitch} outside 0-127")
    return pitch


FLAT_NAMES = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")


def midi_to_note(pitch):
    """Name a MIDI number with flats, e.g. 75 is ``"Eb5"``; None is ``"---"``."""
    if pitch is None:
        return "---"
    if not 0 <= pitch <= 127:
        raise ValueError(f"pitch {pitch} outside 0-127")
    octave, degree = divmod(pitch, 12)
    return f"{FLAT_NAMES[degree]}{octave - 1}"
