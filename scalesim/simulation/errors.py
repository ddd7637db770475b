class ConfigError(ValueError):
    """Invalid or inconsistent simulation configuration."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class DegenerateRunError(RuntimeError):
    """Every checkpoint produced an unmeasurable displayed count."""
