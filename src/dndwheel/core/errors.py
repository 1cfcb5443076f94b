"""Error taxonomy for the spin engine.

All engine failures derive from WheelError so the host can catch them
in one place. None of them are fatal to the process.
"""


class WheelError(Exception):
    """Base class for all wheel errors."""


class InvalidConfiguration(WheelError):
    """Entry set is empty or has no positive weight.

    Recoverable by fixing the configuration; spin() refuses to run
    until then.
    """


class InvalidSpinParameters(WheelError):
    """Duration or rotation count is out of range.

    A programmer error, normally caught once when settings are loaded.
    """


class SpinInProgress(WheelError):
    """A spin was requested while another one is still running."""
