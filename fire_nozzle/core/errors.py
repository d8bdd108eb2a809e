"""
Errors raised by the targeting pipeline.

None of these are fatal to the poll loop: the frame processor catches
them, reports them and moves on to the next frame.
"""


class FireAimError(Exception):
    """Base class for all pipeline errors"""


class DataFormatError(FireAimError):
    """The temperature field is missing, empty or malformed"""


class ConfigurationError(FireAimError):
    """
    Invalid image dimensions, field of view or configuration file.

    `fallback` holds the attitude the actuator should keep (the current
    one) so callers can withhold actuation without inventing a command.
    """

    def __init__(self, message: str, fallback=None):
        super().__init__(message)
        self.fallback = fallback
