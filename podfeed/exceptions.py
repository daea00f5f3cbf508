"""Errors raised while building a feed.

Exception hierarchy:
    PodfeedError (base)
    ├── ConfigError - bad base URL or config file
    ├── EpisodeFileError - an input file cannot be stat'ed or opened
    ├── MetadataError - audio tags cannot be read
    └── RenderError - the feed cannot be serialized or written
"""


class PodfeedError(Exception):
    """Base class for every error the CLI reports and exits on."""


class ConfigError(PodfeedError):
    """Raised for an unusable base URL or config file."""


class EpisodeFileError(PodfeedError):
    """Raised when an input file cannot be stat'ed or opened.

    Attributes:
        file_path: The path as given on the command line.
        reason: The underlying OS error message.
    """

    def __init__(self, file_path, reason):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"{file_path}: {reason}")


class MetadataError(PodfeedError):
    """Raised when an audio file's title cannot be read from its tags."""


class RenderError(PodfeedError):
    """Raised when the feed cannot be serialized or written."""
