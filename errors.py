class ContactGraphError(Exception):
    """Base class for every fatal error raised by the contacts graph step."""
    def __init__(self, message="Contacts graph extraction failed."):
        self.message = message
        super().__init__(self.message)


class ConfigError(ContactGraphError):
    """Raised when the step configuration is missing or invalid."""


class AccessError(ContactGraphError):
    """Raised when the leak file cannot be opened."""


class FormatError(ContactGraphError):
    """Raised when the leak file cannot be parsed as CSV at all."""


class WriteError(ContactGraphError):
    """Raised when the graph artifact or the manifest cannot be written."""
