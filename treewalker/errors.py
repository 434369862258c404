"""Exception types for TreeWalker.

The walker itself has no recoverable error states: "no more elements" is
reported as an absent result, never as an exception. Exceptions raised by
user-supplied expansion functions propagate unmodified; the types below
only cover misuse of the library.
"""


class WalkerError(Exception):
    """Base class for all TreeWalker errors."""
    pass


class WalkerStateError(WalkerError):
    """Raised when a walker is used after an expansion function failed.

    The original exception is available as ``__cause__``.
    """
    pass


class ConfigurationError(WalkerError, ValueError):
    """Raised when a walk or parallel configuration is invalid."""
    pass
