"""CSV import of certificate participants.

Turns a ``name,date[,...]`` CSV file into new Participant records with
fresh random identifiers and appends them to the store in one write.
Bad lines are skipped with a warning; they never abort the batch.
"""

import re
import secrets
from dataclasses import dataclass, field
from pathlib import Path

from core.config import DEFAULT_PROGRAM_NAME
from core.errors import MalformedRecordError, UserInputError
from core.logger import get_logger
from repositories.participant_repository import ParticipantRepository
from schemas import Participant

logger = get_logger(__name__)

# A field is either a double-quoted run (which may contain commas) or a
# run of non-comma characters. Empty fields between commas are not matched.
_FIELD_RE = re.compile(r'".*?"|[^,]+')

ID_BYTES = 4
CLAIM_KEY_BYTES = 6


@dataclass
class ImportResult:
    """Outcome of parsing (and possibly storing) one CSV file."""

    participants: list[Participant] = field(default_factory=list)
    skipped: list[MalformedRecordError] = field(default_factory=list)
    total_in_store: int | None = None

    @property
    def imported_count(self) -> int:
        return len(self.participants)


def generate_id() -> str:
    return secrets.token_hex(ID_BYTES)


def generate_claim_key() -> str:
    return secrets.token_hex(CLAIM_KEY_BYTES)


def _unquote(value: str) -> str:
    """Strip one wrapping pair of double quotes and surrounding whitespace."""
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value.strip()


def is_header(line: str) -> bool:
    lowered = line.lower()
    return "name" in lowered and "date" in lowered


def split_fields(line: str) -> list[str]:
    return _FIELD_RE.findall(line)


def parse_line(line_number: int, line: str) -> tuple[str, str]:
    """Extract ``(name, date)`` from one non-blank CSV line.

    Raises:
        MalformedRecordError: If the line has fewer than two fields or an
            empty name or date.
    """
    fields = split_fields(line)
    if len(fields) < 2:
        raise MalformedRecordError(line_number, line, "expected name,date")

    name = _unquote(fields[0])
    date = _unquote(fields[1])
    if not name or not date:
        raise MalformedRecordError(line_number, line, "missing name or date")
    return name, date


def parse_participants(text: str) -> ImportResult:
    """Parse CSV text into new participants with freshly generated ids.

    The first line is treated as a header when it mentions both "name" and
    "date". Blank lines are ignored; malformed lines are collected in
    ``ImportResult.skipped`` and logged.
    """
    result = ImportResult()
    lines = text.strip().split("\n")
    start = 1 if lines and is_header(lines[0]) else 0

    for index in range(start, len(lines)):
        line = lines[index].strip()
        if not line:
            continue

        try:
            name, date = parse_line(index + 1, line)
        except MalformedRecordError as e:
            logger.warning(
                "import.line.skipped",
                line=e.line_number,
                reason=e.reason,
                raw=e.raw,
            )
            result.skipped.append(e)
            continue

        result.participants.append(
            Participant(
                id=generate_id(),
                claim_key=generate_claim_key(),
                name=name,
                date=date,
                program=DEFAULT_PROGRAM_NAME,
            )
        )

    return result


def read_csv(csv_path: Path) -> str:
    """Read a CSV file given on the command line.

    Raises:
        UserInputError: If the path does not exist, is not a file, or is
            not UTF-8 text.
    """
    full_path = csv_path.resolve()
    if not full_path.is_file():
        raise UserInputError(f"File not found: {full_path}")
    try:
        return full_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise UserInputError(f"Not a UTF-8 text file: {full_path}") from e


def import_csv(csv_path: Path, repo: ParticipantRepository) -> ImportResult:
    """Parse a CSV file and append every valid row to the store.

    The store is not touched when no rows parse.

    Raises:
        UserInputError: If the CSV file does not exist
        StorageError: If the existing store is corrupt or cannot be written
    """
    result = parse_participants(read_csv(csv_path))

    if not result.participants:
        logger.info(
            "import.empty",
            path=str(csv_path),
            skipped=len(result.skipped),
        )
        return result

    result.total_in_store = repo.append(result.participants)
    logger.info(
        "import.complete",
        path=str(csv_path),
        imported=result.imported_count,
        skipped=len(result.skipped),
        total=result.total_in_store,
    )
    return result
