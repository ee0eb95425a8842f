from __future__ import annotations

"""Exception types raised by the assessment core."""


class CogscreenError(Exception):
    """Base class for all cogscreen errors."""


class ConfigurationError(CogscreenError):
    """A module config or question is malformed.

    Fatal to the module it belongs to; results already recorded for other
    modules are untouched.
    """


class InputError(CogscreenError):
    """A submission was rejected; the live trial keeps its state."""


class ExternalServiceError(CogscreenError):
    """The narrative summary service is unreachable or unauthorized."""
