class UploadError(Exception):
    """Base exception for all upload-related errors."""


class ConfigurationError(UploadError):
    """Raised when the upload is missing required setup (file, identity, backend)."""
