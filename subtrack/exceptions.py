class ValidationError(ValueError):
    """Raised when a civil date or timezone name cannot be interpreted."""
