class FramingModelException(Exception):
    """Base class for every error raised by the framing model."""


class ConfigError(FramingModelException):
    """Raised when a configuration value cannot be converted or is out of range."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration value for '{key}' ({value!r}): {reason}")


class InputError(FramingModelException):
    """Raised for malformed or out-of-range input."""

    def __init__(self, message: str, *, field: str | None = None, value: object = None) -> None:
        self.field = field
        self.value = value
        super().__init__(message)


class FitError(FramingModelException):
    """Raised when a model stage has insufficient data or its optimizer does not converge."""

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        super().__init__(f"[{stage}] {message}")


class PredictionError(FramingModelException):
    """Raised when an evaluation point lies outside the domain the surface was fit on."""

    def __init__(self, message: str, *, index: int, field: str, value: object) -> None:
        self.index = index
        self.field = field
        self.value = value
        super().__init__(f"Point {index}: {message} ({field}={value!r})")
