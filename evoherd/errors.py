"""Structured error hierarchy for evoherd."""


class EvoherdError(Exception):
    """Base for all evoherd errors."""

    pass


class ConfigurationError(EvoherdError):
    """Simulation setup is invalid (no areas, no spawnable kinds, ...)."""

    pass


class AgentStateError(EvoherdError):
    """Agent in invalid lifecycle state for requested operation."""

    pass


class ExportError(EvoherdError):
    """Generation statistics could not be written."""

    pass


class SerializationError(EvoherdError):
    """Agent snapshot serialization/deserialization failed."""

    pass
