"""Base error types shared across postfixcsv."""

from __future__ import annotations


class PostfixCsvError(Exception):
    """Base class for all postfixcsv errors."""


class GridError(PostfixCsvError):
    """Invalid grid construction, e.g. an empty separator."""


class ConfigError(PostfixCsvError):
    """Invalid configuration value.

    Attributes:
        key: The offending configuration key.
    """

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(f"Invalid config value for {key!r}: {message}")
