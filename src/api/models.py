"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Request models only check types, strictly for integers so that booleans
and numeric strings are not coerced; content rules (lengths, bounds, emptiness)
are enforced by the domain so that they surface as registry error kinds.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from src.domain.ports import DomainRecord, Event, Report, Review, Role


class RegisterDomainRequest(BaseModel):
    """Request model for domain registration."""

    name: str = Field(
        ...,
        description="Domain name, at most 253 bytes. Stored stripped and lowercased; "
        "the proof token must be computed over that normalized form",
        examples=["example.btc"],
    )
    identity_metadata: str = Field(..., description="Owner identity metadata, at most 512 bytes")
    proof_token: str = Field(..., description="Ownership proof from GET /v1/challenge")


class UpdateDomainRequest(BaseModel):
    """Request model for replacing a domain's identity metadata."""

    identity_metadata: str


class TransferOwnershipRequest(BaseModel):
    """Request model for ownership transfer."""

    new_owner: str


class SubmitReviewRequest(BaseModel):
    """Request model for a peer review."""

    rating: StrictInt = Field(..., description="Rating in [-5, 5]")
    comment: str = Field("", description="Optional comment, at most 256 bytes")


class ReportDomainRequest(BaseModel):
    """Request model for an abuse report."""

    reason_code: StrictInt = Field(..., description="Reason code in [0, 255]")
    details: str = Field(..., description="Report details, at most 256 bytes")


class ResolveDisputeRequest(BaseModel):
    """Request model for dispute resolution."""

    status: bool = Field(..., description="True when the report is upheld")


class AssignRoleRequest(BaseModel):
    """Request model for role assignment."""

    role: Role


class AckResponse(BaseModel):
    """Response model for mutations carrying no payload."""

    ok: bool = True


class DomainResponse(BaseModel):
    """Response model for a domain record."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    owner: str
    identity_metadata: str
    identity_verified: bool
    reputation_score: int
    registered_at: int
    updated_at: int

    @classmethod
    def from_record(cls, record: DomainRecord) -> "DomainResponse":
        return cls.model_validate(record)


class ReviewResponse(BaseModel):
    """Response model for a stored review."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    reviewer: str
    rating: int
    comment: str
    reviewed_at: int
    weight: int

    @classmethod
    def from_record(cls, review: Review) -> "ReviewResponse":
        return cls.model_validate(review)


class ReportResponse(BaseModel):
    """Response model for a stored report."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    reporter: str
    reason_code: int
    details: str
    reported_at: int
    resolved: bool
    upheld: bool | None
    resolved_at: int | None

    @classmethod
    def from_record(cls, report: Report) -> "ReportResponse":
        return cls.model_validate(report)


class ReportStatusResponse(BaseModel):
    """Response model for a report's resolution flag."""

    resolved: bool


class RoleResponse(BaseModel):
    """Response model for an identity's role; role is null when none is held."""

    identity: str
    role: Role | None


class ChallengeResponse(BaseModel):
    """Response model for an ownership challenge."""

    name: str
    owner: str
    proof_token: str


class EventResponse(BaseModel):
    """Response model for one event log entry."""

    model_config = ConfigDict(from_attributes=True)

    height: int
    name: str
    caller: str
    payload: dict

    @classmethod
    def from_record(cls, event: Event) -> "EventResponse":
        return cls.model_validate(event)


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
    error: str
