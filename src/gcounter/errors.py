"""
Errors raised by the G-Counter library.
"""


class InvalidArgumentError(ValueError):
    """
    Raised when an operation receives an argument it cannot accept.

    The usual cause is a negative increment. No state is modified when
    this error is raised.
    """
