"""Exception handling module."""

from mdpack.core.exceptions.base import (
    ChecksumIOError,
    ConfigError,
    FormatError,
    MdPackError,
    OutputIOError,
    RegistryReleasedError,
    SourceIOError,
    UnsupportedResourceError,
)

__all__ = [
    "MdPackError",
    "SourceIOError",
    "FormatError",
    "OutputIOError",
    "ChecksumIOError",
    "ConfigError",
    "UnsupportedResourceError",
    "RegistryReleasedError",
]
