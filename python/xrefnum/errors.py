class XrefError(Exception):
    """Base class for every error raised deliberately by xrefnum."""


class TreeContractError(XrefError, TypeError):
    """The object handed to the engine can't be traversed as a document tree."""


class DuplicateTitleError(XrefError, ValueError):
    """Two items normalize to the same implicit reference key and the config forbids it."""


class ConfigError(XrefError, ValueError):
    """A configuration value is malformed."""
