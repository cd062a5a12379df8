"""Exception types shared across the trading cycle."""


class TraderError(Exception):
    """Base class for errors raised by the trader itself."""


class ConfigurationError(TraderError):
    """
    Raised when the process is misconfigured for what it is asked to do.

    Always fatal: live trading must not proceed without the settings it needs.
    """
