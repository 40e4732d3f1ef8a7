"""
HELMBRIDGE ERRORS
-----------------
Every failure raised by the bridge derives from BridgeError. The engine
recovers per-resource errors (ResolutionError, RegistrationError); all
others travel up to the CLI, which decides the exit status.
"""

from typing import Optional


class BridgeError(RuntimeError):
    """Base class for all helm-bridge failures."""


class ConfigError(BridgeError):
    """Required configuration is missing or unreadable."""


class ManifestSourceError(BridgeError):
    """The rendered manifest for the release could not be obtained."""


class ValuesFileError(BridgeError):
    """The values document could not be read or written back."""


class ResourceError(BridgeError):
    """A failure scoped to a single resource; the batch carries on."""

    def __init__(self, message: str, identity: Optional[str] = None):
        super().__init__(message)
        self.identity = identity


class ResolutionError(ResourceError):
    """Runtime details for a resource could not be read from the cluster."""


class UnsupportedKindError(ResolutionError):
    """The resource kind has no detail extractor."""


class RegistrationError(ResourceError):
    """The Bridge service refused or never received a registration."""


class TranslationError(BridgeError):
    """A placeholder could not be resolved; the document is left untouched."""
