"""SQLAlchemy schemas of every persisted entity."""

from asoniped_backend.database.schemas.donation import DonationSchema
from asoniped_backend.database.schemas.record import (
    BiomechanicalBenefitSchema,
    CompletePersonalDataSchema,
    DisabilityDataSchema,
    EnrollmentFormSchema,
    FamilyInformationSchema,
    PermanentLimitationSchema,
    PersonalDataSchema,
    RecordDocumentSchema,
    RecordNoteSchema,
    RecordSchema,
    RegistrationRequirementsSchema,
    SocioeconomicDataSchema,
)
from asoniped_backend.database.schemas.ticket import (
    AnonymousTicketMessageSchema,
    AnonymousTicketSchema,
    DonationTicketSchema,
    TicketMessageSchema,
)
from asoniped_backend.database.schemas.user import (
    RoleSchema,
    UserSchema,
    user_role_assignments,
)
from asoniped_backend.database.schemas.volunteer import (
    VolunteerOptionSchema,
    VolunteerRegistrationSchema,
    VolunteerSchema,
)

__all__ = [
    "AnonymousTicketMessageSchema",
    "AnonymousTicketSchema",
    "BiomechanicalBenefitSchema",
    "CompletePersonalDataSchema",
    "DisabilityDataSchema",
    "DonationSchema",
    "DonationTicketSchema",
    "EnrollmentFormSchema",
    "FamilyInformationSchema",
    "PermanentLimitationSchema",
    "PersonalDataSchema",
    "RecordDocumentSchema",
    "RecordNoteSchema",
    "RecordSchema",
    "RegistrationRequirementsSchema",
    "RoleSchema",
    "SocioeconomicDataSchema",
    "TicketMessageSchema",
    "UserSchema",
    "VolunteerOptionSchema",
    "VolunteerRegistrationSchema",
    "VolunteerSchema",
    "user_role_assignments",
]
