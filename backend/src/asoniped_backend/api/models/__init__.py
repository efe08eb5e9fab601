"""Models used for API request and response payloads."""

from asoniped_backend.api.models.auth import (
    AdminUserCreateRequest,
    AdminUserUpdateRequest,
    AuthTokenResponse,
    ChangePasswordRequest,
    ProfileUpdateRequest,
    RoleAssignmentRequest,
    UserListResponse,
    UserLoginRequest,
    UserLoginResponse,
    UserRegisterRequest,
    UserRegisterResponse,
    UserResponse,
)
from asoniped_backend.api.models.common import MessageResponse
from asoniped_backend.api.models.donation import (
    DonationCreatedResponse,
    DonationCreateRequest,
    DonationResponse,
)
from asoniped_backend.api.models.record import (
    CedulaCheckResponse,
    DocumentInput,
    GeographicEntry,
    HandoverRequest,
    NoteCreateRequest,
    NoteUpdateRequest,
    PersonalDataInput,
    PersonalDataPatch,
    Phase3Request,
    RecordActionRequest,
    RecordCreateRequest,
    RecordDetailResponse,
    RecordDocumentResponse,
    RecordListResponse,
    RecordNoteResponse,
    RecordResponse,
    RecordStatsResponse,
    RecordStatusRequest,
)
from asoniped_backend.api.models.ticket import (
    AnonymousMessageCreateRequest,
    AnonymousMessageResponse,
    AnonymousTicketCreateRequest,
    AnonymousTicketResponse,
    DonationTicketCreateRequest,
    DonationTicketResponse,
    TicketMessageCreateRequest,
    TicketMessageResponse,
    TicketUpdateRequest,
)
from asoniped_backend.api.models.volunteer import (
    AvailableSpotsResponse,
    CancelRegistrationRequest,
    EnrollmentResponse,
    EnrollResponse,
    RegistrationRequest,
    RegistrationResponse,
    RegistrationResultResponse,
    VolunteerCreateRequest,
    VolunteerListResponse,
    VolunteerOptionRequest,
    VolunteerOptionResponse,
    VolunteerResponse,
    VolunteerUpdateRequest,
)

__all__ = [
    "AdminUserCreateRequest",
    "AdminUserUpdateRequest",
    "AnonymousMessageCreateRequest",
    "AnonymousMessageResponse",
    "AnonymousTicketCreateRequest",
    "AnonymousTicketResponse",
    "AuthTokenResponse",
    "AvailableSpotsResponse",
    "CancelRegistrationRequest",
    "CedulaCheckResponse",
    "ChangePasswordRequest",
    "DocumentInput",
    "DonationCreateRequest",
    "DonationCreatedResponse",
    "DonationResponse",
    "DonationTicketCreateRequest",
    "DonationTicketResponse",
    "EnrollResponse",
    "EnrollmentResponse",
    "GeographicEntry",
    "HandoverRequest",
    "MessageResponse",
    "NoteCreateRequest",
    "NoteUpdateRequest",
    "PersonalDataInput",
    "PersonalDataPatch",
    "Phase3Request",
    "ProfileUpdateRequest",
    "RecordActionRequest",
    "RecordCreateRequest",
    "RecordDetailResponse",
    "RecordDocumentResponse",
    "RecordListResponse",
    "RecordNoteResponse",
    "RecordResponse",
    "RecordStatsResponse",
    "RecordStatusRequest",
    "RegistrationRequest",
    "RegistrationResponse",
    "RegistrationResultResponse",
    "RoleAssignmentRequest",
    "TicketMessageCreateRequest",
    "TicketMessageResponse",
    "TicketUpdateRequest",
    "UserListResponse",
    "UserLoginRequest",
    "UserLoginResponse",
    "UserRegisterRequest",
    "UserRegisterResponse",
    "UserResponse",
    "VolunteerCreateRequest",
    "VolunteerListResponse",
    "VolunteerOptionRequest",
    "VolunteerOptionResponse",
    "VolunteerResponse",
    "VolunteerUpdateRequest",
]
