"""Exceptions raised by cypar"""


class ConfigurationError(ValueError):
    """Invalid or missing command-line configuration. Fatal, raised before any work starts."""


class DiscoveryError(OSError):
    """Spec directory is missing or unreadable. Logged by discovery, never fatal."""
