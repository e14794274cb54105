"""Test data builders."""

from schemas import Participant


def make_participant(**overrides: str) -> Participant:
    fields = {
        "id": "a1b2c3d4",
        "claim_key": "0123456789ab",
        "name": "Jane Doe",
        "date": "2026-02-13",
    }
    fields.update(overrides)
    return Participant(**fields)
