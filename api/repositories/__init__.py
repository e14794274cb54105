"""Repository layer for participant storage.

Repositories encapsulate all reads and writes of the participant file,
keeping services free of file-format details and easy to test against a
temporary path.
"""

from repositories.participant_repository import ParticipantRepository

__all__ = [
    "ParticipantRepository",
]
