"""Exception hierarchy shared by core, services and adapters."""


class ModuscopeError(Exception):
    """Base class for all moduscope errors."""


class InvalidArgumentError(ModuscopeError, ValueError):
    """Raised when construction parameters or configuration are invalid."""


class ExtensionNotLoadedError(ModuscopeError, RuntimeError):
    """Raised when a required driver package is not importable."""


class SinkRuntimeError(ModuscopeError, RuntimeError):
    """Raised when a sink is used before it was bound to its destination."""


class ServiceNotFoundError(ModuscopeError, LookupError):
    """Raised when the container cannot resolve a service name."""


class ActionNotFoundError(ModuscopeError, LookupError):
    """Raised when a controller has no method for the requested action."""
