class ProcessingError(Exception):
    """Raised when an image cannot be decoded, resized or encoded."""


class UnsupportedImageFormatError(ProcessingError):
    """Raised when no codec is available for the requested extension."""
