"""java2graph custom exceptions."""


class Java2GraphError(Exception):
    """Base exception for java2graph errors."""


class TypeNotFoundError(Java2GraphError):
    """Type is not available on the class path."""


class ClassFormatError(Java2GraphError):
    """Error parsing a compiled class file."""


class ArchiveError(Java2GraphError):
    """Archive could not be opened or read."""


class ConfigError(Java2GraphError):
    """Invalid configuration value."""
