"""tabseq - a keyboard-driven terminal sequencer shell."""

__version__ = "0.1.0"
