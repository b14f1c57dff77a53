"""Tests for tabseq.app - the event loop with a mocked terminal."""

from unittest import mock

import pytest
from blessed.keyboard import Keystroke

from tabseq.app import TabSeq
from tabseq.config import Config
from tabseq.dispatch import KeyEvent, KeyKind
from tabseq.errors import DeviceUnavailable
from tabseq.playback import Sequencer
from tabseq.state import AppState, Tab


def _make_app(events, opener=None, clock=None, config=None):
    app = TabSeq(
        config=config or Config(),
        term=mock.MagicMock(),
        sequencer=Sequencer(sleep=clock or (lambda s: None)),
        opener=opener or mock.MagicMock(),
    )
    app.read_event = mock.MagicMock(side_effect=list(events))
    app.draw = mock.MagicMock()
    return app


class TestLoop:
    def test_tab_track_quit(self):
        app = _make_app([KeyEvent("#"), KeyEvent("L"), KeyEvent("q")])
        app.loop()
        assert app.state == AppState(tab=Tab.PREVIEW, track=1, exited=True)
        # initial frame plus one per dispatched event
        assert app.draw.call_count == 4

    def test_state_before_exit(self):
        seen = []
        app = _make_app([KeyEvent("#"), KeyEvent("L"), KeyEvent("q")])
        app.draw.side_effect = lambda: seen.append(app.state)
        app.loop()
        assert (seen[-2].tab, seen[-2].track, seen[-2].exited) == (Tab.PREVIEW, 1, False)

    def test_non_press_and_empty_events_discarded(self):
        app = _make_app([
            None,
            KeyEvent("l", KeyKind.RELEASE),
            KeyEvent("l", KeyKind.REPEAT),
            KeyEvent("q"),
        ])
        app.loop()
        assert app.state.track == 0
        assert app.draw.call_count == 2

    def test_ignored_key_still_redraws(self):
        app = _make_app([KeyEvent("z"), KeyEvent("q")])
        app.loop()
        assert app.draw.call_count == 3

    def test_play_uses_configured_phrase_and_port(self, sink, clock):
        opener = mock.MagicMock(return_value=sink)
        config = Config(port_name="Synth B")
        app = _make_app([KeyEvent("p"), KeyEvent("q")], opener=opener, clock=clock, config=config)
        app.loop()
        opener.assert_called_once_with("Synth B")
        assert len(sink.writes) == 10
        assert sink.closed
        assert app.status == ""

    def test_device_unavailable_keeps_running(self):
        opener = mock.MagicMock(side_effect=DeviceUnavailable("No MIDI output ports found"))
        app = _make_app([KeyEvent(" "), KeyEvent("l"), KeyEvent("q")], opener=opener)
        app.loop()
        assert opener.call_count == 1
        assert app.state.track == 1
        assert "No MIDI output ports found" in app.status

    def test_write_failure_keeps_running(self, make_sink, clock):
        sink = make_sink(fail_on=3)
        app = _make_app([KeyEvent("p")], opener=lambda name: sink, clock=clock)
        app.read_event.side_effect = [KeyEvent("p"), KeyEvent("@")]
        with pytest.raises(StopIteration):
            # input runs out while the loop is still waiting for a key
            app.loop()
        assert app.state.exited is False
        assert app.state.tab is Tab.COMPOSITION
        assert len(sink.writes) == 2
        assert sink.closed
        assert app.status.startswith("ERROR")

    def test_bad_phrase_keeps_running(self):
        opener = mock.MagicMock()
        config = Config(phrase=(("C4", 1), ("K7", 1)))
        app = _make_app([KeyEvent("p"), KeyEvent("q")], opener=opener, config=config)
        app.loop()
        opener.assert_not_called()
        assert "K7" in app.status

    @pytest.mark.parametrize("phrase", [
        (("C4", 0),),
        (("C4", -1),),
        (("C4", "2"),),
        (("C4", float("nan")),),
        ("C4",),
        (("C4", 1, 2),),
    ])
    def test_malformed_phrase_entry_keeps_running(self, phrase):
        opener = mock.MagicMock()
        app = _make_app([KeyEvent("p"), KeyEvent("l"), KeyEvent("q")],
                        opener=opener, config=Config(phrase=phrase))
        app.loop()
        opener.assert_not_called()
        assert app.state.track == 1
        assert app.status.startswith("ERROR: bad phrase entry")

    def test_successful_play_clears_status(self, sink):
        opener = mock.MagicMock(side_effect=[DeviceUnavailable("gone"), sink])
        app = _make_app([KeyEvent("p"), KeyEvent("p"), KeyEvent("q")], opener=opener)
        app.loop()
        assert app.status == ""

    def test_track_count_from_config(self):
        app = _make_app([KeyEvent("h"), KeyEvent("q")], config=Config(track_count=3))
        app.loop()
        assert app.state.track == 2


class TestReadEvent:
    def _app(self, keystroke):
        term = mock.MagicMock()
        term.inkey.return_value = keystroke
        return TabSeq(term=term)

    def test_character(self):
        assert self._app(Keystroke("#")).read_event() == KeyEvent("#")

    def test_named_sequence(self):
        ks = Keystroke("\x1b[D", code=260, name="KEY_LEFT")
        assert self._app(ks).read_event() == KeyEvent("KEY_LEFT")

    def test_timeout_gives_none(self):
        assert self._app(Keystroke("")).read_event() is None

    def test_blocks_without_timeout(self):
        app = self._app(Keystroke("q"))
        app.read_event()
        app.term.inkey.assert_called_once_with(timeout=None)


class TestRun:
    def test_run_enters_terminal_modes(self):
        term = mock.MagicMock()
        app = TabSeq(term=term)
        with mock.patch.object(app, "loop") as loop:
            app.run()
        loop.assert_called_once()
        term.fullscreen.assert_called_once()
        term.cbreak.assert_called_once()
        term.hidden_cursor.assert_called_once()
