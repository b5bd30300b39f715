"""Custom exceptions for plugin resolution."""


class PluginError(Exception):
    """Base exception for plugin resolution errors."""


class ManifestNotFoundError(PluginError):
    """No package.json in the given directory."""


class ManifestParseError(PluginError):
    """package.json is not valid JSON or has the wrong shape."""


class PluginNotInstalledError(PluginError):
    """A resolved plugin package has no directory under node_modules."""
