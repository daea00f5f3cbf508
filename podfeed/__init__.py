"""Build a podcast RSS feed from a directory of audio files."""

__version__ = "1.0.0"
