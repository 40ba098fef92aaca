"""
Exception hierarchy for mathdown
"""


class MathdownError(Exception):
    """Base class for errors raised by mathdown"""
    pass


class MacroSourceError(MathdownError):
    """Raised when the configured macro file cannot be read"""

    def __init__(self, path: str, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"couldn't read macro file {path}: {cause}")


class RenderError(MathdownError):
    """Raised by a render backend when an expression cannot be typeset"""
    pass


class HostProtocolError(MathdownError):
    """Raised when the host build tool sends a payload we cannot interpret"""
    pass
