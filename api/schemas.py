"""Pydantic schemas for stored records, page context and API responses."""

from pydantic import BaseModel, ConfigDict, Field

from core.config import DEFAULT_PROGRAM_NAME


class Participant(BaseModel):
    """One certificate recipient as stored in the participants file.

    Field names on disk are camelCase (``claimKey``); Python code uses
    ``claim_key``. Records are immutable once created.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(min_length=1)
    claim_key: str = Field(alias="claimKey", min_length=1)
    name: str = Field(min_length=1)
    date: str = Field(min_length=1)
    program: str = DEFAULT_PROGRAM_NAME

    def to_record(self) -> dict[str, str]:
        """Serialize with the on-disk field names and order."""
        return self.model_dump(by_alias=True)


class CertificatePageContext(BaseModel):
    """Every value the certificate page template substitutes.

    The template refers to these fields by name; nothing else is passed in.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    date: str
    program: str
    cert_url: str
    image_url: str
    cert_id: str
    add_to_profile_url: str
    share_url: str
    org_name: str


class RecentCertificate(BaseModel):
    """A row in the home page's recent certificates list."""

    id: str
    name: str
    date: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
