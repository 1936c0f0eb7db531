class CivcalError(Exception):
    """Base error."""

class InvalidFieldError(CivcalError, ValueError):
    """Raised for an unknown calendar field, or a field value outside its legal range."""

class InvalidRuleError(CivcalError, ValueError):
    """Raised when a daylight-saving rule is configured with inconsistent values."""

class ArithmeticRangeError(CivcalError, ValueError):
    """Raised when a time would not fit in a signed 64-bit millisecond count."""
