"""
API v1 routes.

Defines REST endpoints for the trust registry. Registry errors raised by
the service are turned into responses by the handler in src.api.errors.
"""

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_caller_identity, get_registry, get_verifier
from src.api.models import (
    AckResponse,
    AssignRoleRequest,
    ChallengeResponse,
    DomainResponse,
    ErrorResponse,
    EventResponse,
    RegisterDomainRequest,
    ReportDomainRequest,
    ReportResponse,
    ReportStatusResponse,
    ResolveDisputeRequest,
    ReviewResponse,
    RoleResponse,
    SubmitReviewRequest,
    TransferOwnershipRequest,
    UpdateDomainRequest,
)
from src.domain.ports import Role
from src.domain.service import TrustRegistry
from src.domain.validation import normalize_name
from src.domain.verification import HashChallengeVerifier

router = APIRouter(tags=["v1"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Domain or report not found"}}
_INVALID = {422: {"model": ErrorResponse, "description": "Invalid input"}}
_FORBIDDEN = {403: {"model": ErrorResponse, "description": "Caller not allowed"}}
_CONFLICT = {409: {"model": ErrorResponse, "description": "Duplicate or already resolved"}}


@router.post(
    "/domains",
    response_model=AckResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse, "description": "Ownership proof rejected"},
        **_CONFLICT,
        **_INVALID,
    },
    summary="Register a domain",
    description="Claim a name for the calling identity. The proof token must match "
    "the ownership challenge for (name, caller).",
)
async def register_domain(
    request_data: RegisterDomainRequest,
    caller: str = Depends(get_caller_identity),
    registry: TrustRegistry = Depends(get_registry),
) -> AckResponse:
    registry.register_domain(
        caller, request_data.name, request_data.identity_metadata, request_data.proof_token
    )
    return AckResponse()


@router.get(
    "/domains",
    response_model=list[DomainResponse],
    summary="List domains",
)
async def list_domains(
    owner: str | None = Query(None, description="Only domains owned by this identity"),
    registry: TrustRegistry = Depends(get_registry),
) -> list[DomainResponse]:
    return [DomainResponse.from_record(record) for record in registry.list_domains(owner)]


@router.get(
    "/domains/{name}",
    response_model=DomainResponse,
    responses=_NOT_FOUND,
    summary="Get domain info",
)
async def get_domain_info(
    name: str,
    registry: TrustRegistry = Depends(get_registry),
) -> DomainResponse:
    return DomainResponse.from_record(registry.get_domain_info(name))


@router.put(
    "/domains/{name}",
    response_model=AckResponse,
    responses={**_NOT_FOUND, **_FORBIDDEN, **_INVALID},
    summary="Update domain metadata",
    description="Owner only. Replacing the metadata resets identity verification.",
)
async def update_domain_info(
    name: str,
    request_data: UpdateDomainRequest,
    caller: str = Depends(get_caller_identity),
    registry: TrustRegistry = Depends(get_registry),
) -> AckResponse:
    registry.update_domain_info(caller, name, request_data.identity_metadata)
    return AckResponse()


@router.post(
    "/domains/{name}/transfer",
    response_model=AckResponse,
    responses={**_NOT_FOUND, **_FORBIDDEN, **_INVALID},
    summary="Transfer domain ownership",
    description="Owner only. The new owner starts with identity verification reset.",
)
async def transfer_ownership(
    name: str,
    request_data: TransferOwnershipRequest,
    caller: str = Depends(get_caller_identity),
    registry: TrustRegistry = Depends(get_registry),
) -> AckResponse:
    registry.transfer_ownership(caller, name, request_data.new_owner)
    return AckResponse()


@router.post(
    "/domains/{name}/verify-identity",
    response_model=AckResponse,
    responses={**_NOT_FOUND, **_FORBIDDEN},
    summary="Verify domain identity",
    description="Moderator or admin only.",
)
async def verify_identity(
    name: str,
    caller: str = Depends(get_caller_identity),
    registry: TrustRegistry = Depends(get_registry),
) -> AckResponse:
    registry.verify_identity(caller, name)
    return AckResponse()


@router.post(
    "/domains/{name}/reviews",
    response_model=AckResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_NOT_FOUND, **_CONFLICT, **_INVALID},
    summary="Submit a review",
    description="One review per identity and domain. Recomputes the domain's reputation.",
)
async def submit_review(
    name: str,
    request_data: SubmitReviewRequest,
    caller: str = Depends(get_caller_identity),
    registry: TrustRegistry = Depends(get_registry),
) -> AckResponse:
    registry.submit_review(caller, name, request_data.rating, request_data.comment)
    return AckResponse()


@router.get(
    "/domains/{name}/reviews",
    response_model=list[ReviewResponse],
    responses=_NOT_FOUND,
    summary="List reviews",
)
async def list_reviews(
    name: str,
    registry: TrustRegistry = Depends(get_registry),
) -> list[ReviewResponse]:
    return [ReviewResponse.from_record(review) for review in registry.list_reviews(name)]


@router.post(
    "/domains/{name}/reports",
    response_model=AckResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_NOT_FOUND, **_CONFLICT, **_INVALID},
    summary="Report a domain",
    description="One report per identity and domain.",
)
async def report_domain(
    name: str,
    request_data: ReportDomainRequest,
    caller: str = Depends(get_caller_identity),
    registry: TrustRegistry = Depends(get_registry),
) -> AckResponse:
    registry.report_domain(caller, name, request_data.reason_code, request_data.details)
    return AckResponse()


@router.get(
    "/domains/{name}/reports",
    response_model=list[ReportResponse],
    responses={**_NOT_FOUND, **_FORBIDDEN},
    summary="List reports",
    description="Moderator or admin only.",
)
async def list_reports(
    name: str,
    unresolved_only: bool = Query(False),
    caller: str = Depends(get_caller_identity),
    registry: TrustRegistry = Depends(get_registry),
) -> list[ReportResponse]:
    reports = registry.list_reports(caller, name, unresolved_only)
    return [ReportResponse.from_record(report) for report in reports]


@router.get(
    "/domains/{name}/reports/{reporter}",
    response_model=ReportStatusResponse,
    responses=_NOT_FOUND,
    summary="Get report status",
)
async def get_report_status(
    name: str,
    reporter: str,
    registry: TrustRegistry = Depends(get_registry),
) -> ReportStatusResponse:
    return ReportStatusResponse(resolved=registry.get_report_status(name, reporter))


@router.post(
    "/domains/{name}/reports/{reporter}/resolve",
    response_model=AckResponse,
    responses={**_NOT_FOUND, **_FORBIDDEN, **_CONFLICT},
    summary="Resolve a dispute",
    description="Moderator or admin only. A report can be resolved once.",
)
async def resolve_dispute(
    name: str,
    reporter: str,
    request_data: ResolveDisputeRequest,
    caller: str = Depends(get_caller_identity),
    registry: TrustRegistry = Depends(get_registry),
) -> AckResponse:
    registry.resolve_dispute(caller, name, reporter, request_data.status)
    return AckResponse()


@router.put(
    "/roles/{identity}",
    response_model=AckResponse,
    responses={**_FORBIDDEN, **_INVALID},
    summary="Assign a role",
    description="Admin only. Assigning 'none' removes the identity's role.",
)
async def assign_role(
    identity: str,
    request_data: AssignRoleRequest,
    caller: str = Depends(get_caller_identity),
    registry: TrustRegistry = Depends(get_registry),
) -> AckResponse:
    registry.assign_role(caller, identity, request_data.role)
    return AckResponse()


@router.get(
    "/roles/{identity}",
    response_model=RoleResponse,
    summary="Get an identity's role",
)
async def get_user_role(
    identity: str,
    registry: TrustRegistry = Depends(get_registry),
) -> RoleResponse:
    role = registry.get_user_role(identity)
    return RoleResponse(identity=identity, role=None if role == Role.NONE else role)


@router.get(
    "/challenge",
    response_model=ChallengeResponse,
    summary="Get the ownership challenge",
    description="Proof token that registers `name` for `owner`. Stands in for "
    "an external ownership oracle. The name is stripped and lowercased before the "
    "token is computed, as registration does; a token computed by hand over a "
    "mixed-case name is rejected.",
)
async def get_challenge(
    name: str = Query(..., min_length=1),
    owner: str = Query(..., min_length=1),
    verifier: HashChallengeVerifier = Depends(get_verifier),
) -> ChallengeResponse:
    name = normalize_name(name)
    return ChallengeResponse(name=name, owner=owner, proof_token=verifier.issue(name, owner))


@router.get(
    "/events",
    response_model=list[EventResponse],
    summary="Read the event log",
)
async def list_events(
    after_height: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    registry: TrustRegistry = Depends(get_registry),
) -> list[EventResponse]:
    return [EventResponse.from_record(event) for event in registry.list_events(after_height, limit)]
