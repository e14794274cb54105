"""Domain exceptions shared by the importer, store, renderer and routes."""


class CertShareError(Exception):
    """Base class for application errors."""


class UserInputError(CertShareError):
    """Raised for a missing or invalid CLI argument."""


class MalformedRecordError(CertShareError):
    """Raised when a CSV line cannot be turned into a participant."""

    def __init__(self, line_number: int, raw: str, reason: str) -> None:
        self.line_number = line_number
        self.raw = raw
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}: {raw}")


class NotFoundError(CertShareError):
    """Raised when no participant has the requested id."""

    def __init__(self, participant_id: str) -> None:
        self.participant_id = participant_id
        super().__init__(f"Certificate not found: {participant_id}")


class GenerationError(CertShareError):
    """Raised when the certificate image cannot be composed."""


class StorageError(CertShareError):
    """Raised when the participant file is missing, unreadable or corrupt."""
