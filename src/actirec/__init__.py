"""actirec: serial sensor recorder with a synchronized activity-label stream."""

__version__ = "0.1.0"
