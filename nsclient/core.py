"""Logging setup and name handling shared across nsclient."""

import logging
import typing as t

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

FORMAT_STRING = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"


def configure_logger(
    loggerObject: logging.Logger,
    *,
    level: t.Union[int, str] = logging.WARNING,
    force: bool = True,
) -> logging.Logger:
    """Performs standard configuration on the provided logger.

    Adds a stream handler formatted with time, level, name, and message,
    unless the logger already has handlers and `force` is false.

    Returns the logger passed.
    """
    if force or len(loggerObject.handlers) == 0:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(FORMAT_STRING))
        loggerObject.addHandler(handler)
    loggerObject.setLevel(level)
    return loggerObject


def enable_logging(level: t.Union[int, str] = logging.INFO) -> logging.Logger:
    """Configure the root logger using `configure_logger`.

    Returns the root logger.
    """
    return configure_logger(logging.getLogger(), level=level)


def clean_format(string: str) -> str:
    """Casts the string to lowercase and replaces spaces with underscores"""
    return string.lower().replace(" ", "_")


def safe_name(name: str) -> str:
    """Turns a display name (e.g. 'The North Pacific') into its URL form."""
    return clean_format(name.strip())


def pretty_name(name: str) -> str:
    """Best effort inverse of safe_name.

    Capitalizes the first letter of every word,
    which will not always match the real capitalization on NationStates.
    """
    return " ".join(
        word[:1].upper() + word[1:] for word in name.replace("_", " ").split(" ")
    )


def same_nation(first: str, second: str) -> bool:
    """Determine if two strings reference the same nation or region."""
    return clean_format(first) == clean_format(second)


class Name(str):
    """A nation or region name, compared and hashed by its safe form."""

    @staticmethod
    def normal(string: str) -> str:
        """Normalize the given string."""
        # Must return a plain str, not Name, or equality recurses
        return str(clean_format(string))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.normal(self) == self.normal(other)
        return NotImplemented

    # str defines __ne__ itself, so it has to be replaced too
    def __ne__(self, other: object) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash(self.normal(self))
