class WatermarkError(Exception):
    """Base class for every error raised by watermarker."""


class NotFoundError(WatermarkError, FileNotFoundError):
    pass


class InvalidImageFormatError(WatermarkError, ValueError):
    pass


class PathNotWritableError(WatermarkError, PermissionError):
    pass


class InvalidConfigError(WatermarkError, ValueError):
    pass


class InvalidWatermarkError(WatermarkError, ValueError):
    pass


class IoFailureError(WatermarkError, OSError):
    pass


class ConfigurationError(WatermarkError, ValueError):
    """Raised before any output is produced while setup errors are pending."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__('; '.join(self.errors))
