"""
Exception types raised by the feature extractors.

Both subclass ValueError, so callers that already guard parameter errors with
`except ValueError` keep working.
"""


class ConfigurationError(ValueError):
    """Invalid extractor parameters, raised at construction time."""


class ConfigMismatchError(ValueError):
    """Input signal does not match the extractor configuration."""

    def __init__(self, expected_rate: int, actual_rate: int):
        self.expected_rate = expected_rate
        self.actual_rate = actual_rate
        super().__init__(
            f"Feature extractor sampling rate ({expected_rate} Hz) "
            f"!= signal sampling rate ({actual_rate} Hz)"
        )
