"""Fatal errors raised by the checker."""


class CheckerError(Exception):
    """Base class for errors that stop a check run."""


class UsageError(CheckerError):
    """The command line could not be understood."""


class ImageIOError(CheckerError):
    """The image file could not be opened, seeked or read."""
