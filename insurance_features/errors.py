class FeatureFlagError(Exception):
    """Base class for feature flag runtime errors."""


class FlagRegistrationError(FeatureFlagError):
    """Raised when the adapter is used before a flag container is registered."""


class FlagSetupError(FeatureFlagError):
    """Raised when the flag provider fails to become ready."""
