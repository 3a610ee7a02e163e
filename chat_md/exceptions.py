"""Exceptions raised at the I/O edges of the exporter."""


class ChatExportError(Exception):
    """Base exception for export errors."""
    pass


class BundleError(ChatExportError):
    """Raised when a JSON export bundle cannot be read or is malformed."""
    pass
