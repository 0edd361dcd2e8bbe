"""Exception hierarchy for nodesize."""


class NodeSizeError(Exception):
    """Base class for errors raised by nodesize."""
    pass


class ConfigError(NodeSizeError):
    """Configuration source could not be read or is not a mapping.

    Raised by the configuration loader; individual invalid values are
    dropped with a warning instead.
    """
    pass


class GraphLoadError(NodeSizeError):
    """Graph snapshot file is malformed.

    Raised when a snapshot cannot be decoded or does not follow the
    ``{"nodes": [...]}`` layout.
    """
    pass
