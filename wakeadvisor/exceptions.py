"""
WakeAdvisor error taxonomy
"""


class WakeAdvisorError(Exception):
    """Base class for all WakeAdvisor errors"""


class ConfigurationError(WakeAdvisorError):
    """Required configuration (e.g. the AISStream API key) is missing"""


class DecodeError(WakeAdvisorError):
    """A single stream frame could not be decoded"""

    def __init__(self, message: str, frame=None):
        super().__init__(message)
        self.frame = frame


class ProtocolSurprise(DecodeError):
    """Frame is valid JSON but has an unknown kind or lacks an expected field"""


class TransportError(WakeAdvisorError):
    """Connect, send or receive failed on the stream connection"""
