"""
Frame rendering for the sequencer shell.

A frame is built as a list of positioned strings and written to stdout in
one call, so the terminal never shows a half-drawn screen.
"""

import sys

from tabseq.config import TAB_NAMES
from tabseq.errors import NoteParseError, TabseqError
from tabseq.pitch import midi_to_note, parse_note
from tabseq.playback import NoteEvent, resolve_phrase
from tabseq.state import Tab


def _flush(buf):
    """Write the entire frame buffer to stdout in one call."""
    sys.stdout.write("".join(buf))
    sys.stdout.flush()


def _clear_screen(t, w, h):
    """Home the cursor, then overwrite every screen position with spaces."""
    buf = [t.home]
    blank = " " * w
    for y in range(h):
        buf.append(t.move_xy(0, y) + blank)
    return buf


def _entry(item):
    """Return ``(name, duration)`` for a phrase entry; None for missing parts."""
    if isinstance(item, NoteEvent):
        return None, item.duration
    if isinstance(item, str):
        return None, None
    try:
        name, duration = item
    except (TypeError, ValueError):
        return None, None
    return name, duration


# ── pieces ───────────────────────────────────────────────

def draw_tab_strip(t, state, y=0):
    parts = []
    for i, name in enumerate(TAB_NAMES):
        label = f" {i + 1}:{name} "
        parts.append(t.reverse(label) if i == state.tab else label)
    return [t.move_xy(0, y) + t.bold("│").join(parts)]


def draw_tracks(t, state, config, x, y, width):
    """One bordered cell per track, the selected one with a green border."""
    buf = []
    n = config.track_count
    cell_w = max(3, width // n)
    for i in range(n):
        cx = x + i * cell_w
        label = str(i + 1).center(cell_w - 2)
        top = "┌" + "─" * (cell_w - 2) + "┐"
        bottom = "└" + "─" * (cell_w - 2) + "┘"
        if i == state.track:
            buf.append(t.move_xy(cx, y) + t.green(top))
            buf.append(t.move_xy(cx, y + 1) + t.green("│") + t.bold(label) + t.green("│"))
            buf.append(t.move_xy(cx, y + 2) + t.green(bottom))
        else:
            buf.append(t.move_xy(cx, y) + top)
            buf.append(t.move_xy(cx, y + 1) + "│" + label + "│")
            buf.append(t.move_xy(cx, y + 2) + bottom)
    return buf


def draw_composition(t, state, config, x, y):
    buf = [t.move_xy(x, y) + t.bold_cyan(f"TRACK {state.track + 1}")]
    try:
        phrase = resolve_phrase(config.phrase)
    except TabseqError as e:
        buf.append(t.move_xy(x, y + 2) + t.yellow(f"PHRASE: {e}"))
        return buf
    steps = sum(ev.duration for ev in phrase)
    seconds = steps * config.step
    buf.append(
        t.move_xy(x, y + 2)
        + f"PHRASE: {len(phrase)} notes | {steps} steps | {seconds:.2f}s"
    )
    return buf


def draw_preview(t, config, x, y, max_rows):
    buf = [t.move_xy(x, y) + t.bold("STEP │ NOTE  PITCH  LEN")]
    for i, item in enumerate(config.phrase[:max_rows]):
        name, duration = _entry(item)
        pitch = None
        if isinstance(item, NoteEvent):
            pitch = item.pitch
            name = midi_to_note(pitch)
        elif name is not None:
            try:
                pitch = parse_note(name)
            except NoteParseError:
                pass
        pitch_text = f"{pitch:5d}" if pitch is not None else t.yellow("  ???")
        buf.append(
            t.move_xy(x, y + 1 + i)
            + f" {i + 1:02d}  │ {str(name or '?'):<5} {pitch_text}  {str(duration):>3}"
        )
    return buf


# ── frame ────────────────────────────────────────────────

def render_frame(t, state, config, status="", width=None, height=None):
    w = t.width if width is None else width
    h = t.height if height is None else height
    buf = _clear_screen(t, w, h)

    buf.extend(draw_tab_strip(t, state))

    # content block, bordered on all sides
    inner_w = max(1, w - 3)
    buf.append(t.move_xy(0, 1) + "┌" + "─" * inner_w + "┐")
    for y in range(2, h - 4):
        buf.append(t.move_xy(0, y) + "│")
        buf.append(t.move_xy(inner_w + 1, y) + "│")
    buf.append(t.move_xy(0, h - 4) + "└" + "─" * inner_w + "┘")

    if state.tab == Tab.TRACKS:
        buf.extend(draw_tracks(t, state, config, 1, 2, inner_w))
    elif state.tab == Tab.COMPOSITION:
        buf.extend(draw_composition(t, state, config, 2, 2))
    else:
        buf.extend(draw_preview(t, config, 2, 2, max(0, h - 7)))

    if status:
        buf.append(t.move_xy(2, h - 3) + t.yellow(status))

    km = config.keymap
    controls = (
        f"{'/'.join(km.tabs)}:Tab | H/L or ←→:Track "
        "| SPACE/P:Play | Q:Quit"
    )
    buf.append(t.move_xy(2, h - 2) + t.magenta(controls))
    return buf


def draw(t, state, config, status=""):
    _flush(render_frame(t, state, config, status))
