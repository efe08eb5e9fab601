"""Create accounts, donations, tickets, records and volunteer tables."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _user_fk(
    name: str, ondelete: str = "SET NULL", *, nullable: bool = True
) -> sa.Column:
    return sa.Column(
        name,
        sa.Integer,
        sa.ForeignKey("users.id", ondelete=ondelete),
        nullable=nullable,
    )


def _record_fk(*, unique: bool = True) -> sa.Column:
    return sa.Column(
        "record_id",
        sa.Integer,
        sa.ForeignKey("records.id", ondelete="CASCADE"),
        nullable=False,
        unique=unique,
    )


def _ticket_columns() -> list[sa.Column]:
    return [
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("closed_at", sa.DateTime(timezone=True)),
        sa.Column("archived_at", sa.DateTime(timezone=True)),
        _user_fk("assigned_admin_id"),
    ]


def upgrade() -> None:
    user_roles = op.create_table(
        "user_roles",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(length=32), nullable=False, unique=True),
        sa.Column("description", sa.String(length=255)),
    )
    op.bulk_insert(
        user_roles,
        [
            {"name": "admin", "description": "Full administrative access"},
            {"name": "user", "description": "Regular account"},
        ],
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("status", sa.String(length=32), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_role_assignments",
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "role_id",
            sa.Integer,
            sa.ForeignKey("user_roles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "donations",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(length=255)),
        sa.Column("email", sa.String(length=255)),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("privacy_accepted", sa.Boolean, nullable=False),
        sa.Column("communication_accepted", sa.Boolean, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "donation_tickets",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "donation_id",
            sa.Integer,
            sa.ForeignKey("donations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _user_fk("user_id"),
        *_ticket_columns(),
    )
    op.create_index(
        "ix_donation_tickets_donation_id", "donation_tickets", ["donation_id"]
    )
    op.create_index("ix_donation_tickets_user_id", "donation_tickets", ["user_id"])

    op.create_table(
        "ticket_messages",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("module_type", sa.String(length=32), nullable=False),
        sa.Column("module_id", sa.Integer, nullable=False),
        _user_fk("sender_id"),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_ticket_messages_module_id", "ticket_messages", ["module_id"])

    op.create_table(
        "anonymous_tickets",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("ticket_id", sa.String(length=32), nullable=False),
        sa.Column(
            "donation_id",
            sa.Integer,
            sa.ForeignKey("donations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("session_id", sa.String(length=64)),
        *_ticket_columns(),
    )
    op.create_index(
        "ix_anonymous_tickets_ticket_id",
        "anonymous_tickets",
        ["ticket_id"],
        unique=True,
    )

    op.create_table(
        "anonymous_ticket_messages",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "ticket_id",
            sa.Integer,
            sa.ForeignKey("anonymous_tickets.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sender_type", sa.String(length=32), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_anonymous_ticket_messages_ticket_id",
        "anonymous_ticket_messages",
        ["ticket_id"],
    )

    op.create_table(
        "records",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("record_number", sa.String(length=16), nullable=False),
        sa.Column("phase", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        _user_fk("created_by"),
        sa.Column("admin_created", sa.Boolean, nullable=False),
        sa.Column("handed_over_to_user", sa.Boolean, nullable=False),
        _user_fk("handed_over_to"),
        sa.Column("handed_over_at", sa.DateTime(timezone=True)),
        _user_fk("handed_over_by"),
        *_timestamps(),
    )
    op.create_index(
        "ix_records_record_number", "records", ["record_number"], unique=True
    )
    op.create_index("ix_records_phase", "records", ["phase"])
    op.create_index("ix_records_status", "records", ["status"])

    op.create_table(
        "personal_data",
        sa.Column("id", sa.Integer, primary_key=True),
        _record_fk(),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("pcd_name", sa.String(length=255)),
        sa.Column("cedula", sa.String(length=32), nullable=False),
        sa.Column("gender", sa.String(length=16)),
        sa.Column("birth_date", sa.Date),
        sa.Column("birth_place", sa.String(length=255)),
        sa.Column("address", sa.Text),
        sa.Column("province", sa.String(length=64)),
        sa.Column("canton", sa.String(length=64)),
        sa.Column("district", sa.String(length=64)),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("mother_name", sa.String(length=255)),
        sa.Column("mother_cedula", sa.String(length=32)),
        sa.Column("mother_phone", sa.String(length=32)),
        sa.Column("father_name", sa.String(length=255)),
        sa.Column("father_cedula", sa.String(length=32)),
        sa.Column("father_phone", sa.String(length=32)),
        sa.Column("legal_guardian_name", sa.String(length=255)),
        sa.Column("legal_guardian_cedula", sa.String(length=32)),
        sa.Column("legal_guardian_phone", sa.String(length=32)),
        *_timestamps(),
    )
    op.create_index("ix_personal_data_cedula", "personal_data", ["cedula"], unique=True)

    op.create_table(
        "complete_personal_data",
        sa.Column("id", sa.Integer, primary_key=True),
        _record_fk(),
        sa.Column("registration_date", sa.Date),
        sa.Column("full_name", sa.String(length=255)),
        sa.Column("pcd_name", sa.String(length=255)),
        sa.Column("cedula", sa.String(length=32)),
        sa.Column("gender", sa.String(length=16)),
        sa.Column("birth_date", sa.Date),
        sa.Column("age", sa.Integer),
        sa.Column("birth_place", sa.String(length=255)),
        sa.Column("exact_address", sa.Text),
        sa.Column("province", sa.String(length=64)),
        sa.Column("canton", sa.String(length=64)),
        sa.Column("district", sa.String(length=64)),
        sa.Column("primary_phone", sa.String(length=32)),
        sa.Column("secondary_phone", sa.String(length=32)),
        sa.Column("email", sa.String(length=255)),
        *_timestamps(),
    )
    op.create_index(
        "ix_complete_personal_data_cedula", "complete_personal_data", ["cedula"]
    )

    op.create_table(
        "family_information",
        sa.Column("id", sa.Integer, primary_key=True),
        _record_fk(),
        sa.Column("mother_name", sa.String(length=255)),
        sa.Column("mother_cedula", sa.String(length=32)),
        sa.Column("mother_occupation", sa.String(length=255)),
        sa.Column("mother_phone", sa.String(length=32)),
        sa.Column("father_name", sa.String(length=255)),
        sa.Column("father_cedula", sa.String(length=32)),
        sa.Column("father_occupation", sa.String(length=255)),
        sa.Column("father_phone", sa.String(length=32)),
        sa.Column("responsible_person", sa.String(length=255)),
        sa.Column("responsible_address", sa.Text),
        sa.Column("responsible_cedula", sa.String(length=32)),
        sa.Column("responsible_occupation", sa.String(length=255)),
        sa.Column("responsible_phone", sa.String(length=32)),
        sa.Column("family_members", sa.JSON, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "disability_data",
        sa.Column("id", sa.Integer, primary_key=True),
        _record_fk(),
        sa.Column("disability_type", sa.String(length=32)),
        sa.Column("medical_diagnosis", sa.Text),
        sa.Column("insurance_type", sa.String(length=32)),
        sa.Column("disability_origin", sa.String(length=32)),
        sa.Column("disability_certificate", sa.String(length=16)),
        sa.Column("conapdis_registration", sa.String(length=16)),
        sa.Column("observations", sa.Text),
    )

    op.create_table(
        "permanent_limitations",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "disability_data_id",
            sa.Integer,
            sa.ForeignKey("disability_data.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("limitation", sa.String(length=64), nullable=False),
        sa.Column("degree", sa.String(length=32), nullable=False),
        sa.Column("observations", sa.Text),
    )

    op.create_table(
        "biomechanical_benefits",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "disability_data_id",
            sa.Integer,
            sa.ForeignKey("disability_data.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("other_description", sa.String(length=255)),
    )

    op.create_table(
        "socioeconomic_data",
        sa.Column("id", sa.Integer, primary_key=True),
        _record_fk(),
        sa.Column("housing_type", sa.String(length=64)),
        sa.Column("available_services", sa.JSON, nullable=False),
        sa.Column("family_income", sa.String(length=64)),
        sa.Column("working_family_members", sa.JSON, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "registration_requirements",
        sa.Column("id", sa.Integer, primary_key=True),
        _record_fk(),
        sa.Column("medical_diagnosis_doc", sa.Boolean),
        sa.Column("birth_certificate_doc", sa.Boolean),
        sa.Column("family_cedulas_doc", sa.Boolean),
        sa.Column("passport_photo_doc", sa.Boolean),
        sa.Column("pension_certificate_doc", sa.Boolean),
        sa.Column("study_certificate_doc", sa.Boolean),
        sa.Column("bank_account_info", sa.String(length=255)),
        sa.Column("affiliation_fee_paid", sa.Boolean),
        *_timestamps(),
    )

    op.create_table(
        "enrollment_form",
        sa.Column("id", sa.Integer, primary_key=True),
        _record_fk(),
        sa.Column("enrollment_date", sa.Date),
        sa.Column("applicant_full_name", sa.String(length=255)),
        sa.Column("applicant_cedula", sa.String(length=32)),
        sa.Column("blood_type", sa.String(length=8)),
        sa.Column("medical_conditions", sa.Text),
        *_timestamps(),
    )

    op.create_table(
        "record_documents",
        sa.Column("id", sa.Integer, primary_key=True),
        _record_fk(unique=False),
        sa.Column("document_type", sa.String(length=64), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("original_name", sa.String(length=255)),
        sa.Column("file_path", sa.String(length=512)),
        sa.Column("file_size", sa.Integer),
        _user_fk("uploaded_by"),
        sa.Column(
            "uploaded_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_record_documents_record_id", "record_documents", ["record_id"]
    )

    op.create_table(
        "record_notes",
        sa.Column("id", sa.Integer, primary_key=True),
        _record_fk(unique=False),
        sa.Column("note", sa.Text, nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("modification_type", sa.String(length=32)),
        sa.Column("admin_comment", sa.Text),
        sa.Column("sections_to_modify", sa.JSON),
        sa.Column("documents_to_replace", sa.JSON),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("resolved_at", sa.DateTime(timezone=True)),
        _user_fk("resolved_by"),
        _user_fk("created_by"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_record_notes_record_id", "record_notes", ["record_id"])

    op.create_table(
        "volunteer_options",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("image_url", sa.String(length=512)),
        sa.Column("date", sa.String(length=64), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("skills", sa.Text),
        sa.Column("tools", sa.Text),
        sa.Column("hour", sa.String(length=32)),
        sa.Column("spots", sa.Integer, nullable=False),
    )

    op.create_table(
        "volunteers",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("first_name", sa.String(length=128), nullable=False),
        sa.Column("last_name", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("age", sa.String(length=16)),
        sa.Column("availability_days", sa.String(length=255)),
        sa.Column("availability_time_slots", sa.String(length=255)),
        sa.Column("interests", sa.Text),
        sa.Column("skills", sa.Text),
        sa.Column("motivation", sa.Text),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column(
            "submission_date",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "volunteer_option_id",
            sa.Integer,
            sa.ForeignKey("volunteer_options.id", ondelete="SET NULL"),
        ),
    )
    op.create_index("ix_volunteers_email", "volunteers", ["email"])

    op.create_table(
        "volunteer_registrations",
        sa.Column("id", sa.Integer, primary_key=True),
        _user_fk("user_id", ondelete="CASCADE", nullable=False),
        sa.Column(
            "volunteer_option_id",
            sa.Integer,
            sa.ForeignKey("volunteer_options.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column(
            "registration_date",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("cancellation_date", sa.DateTime(timezone=True)),
        sa.Column("notes", sa.Text),
        *_timestamps(),
        sa.UniqueConstraint(
            "user_id", "volunteer_option_id", name="uq_volunteer_registration"
        ),
    )
    op.create_index(
        "ix_volunteer_registrations_user_id", "volunteer_registrations", ["user_id"]
    )
    op.create_index(
        "ix_volunteer_registrations_volunteer_option_id",
        "volunteer_registrations",
        ["volunteer_option_id"],
    )


def downgrade() -> None:
    for table in (
        "volunteer_registrations",
        "volunteers",
        "volunteer_options",
        "record_notes",
        "record_documents",
        "enrollment_form",
        "registration_requirements",
        "socioeconomic_data",
        "biomechanical_benefits",
        "permanent_limitations",
        "disability_data",
        "family_information",
        "complete_personal_data",
        "personal_data",
        "records",
        "anonymous_ticket_messages",
        "anonymous_tickets",
        "ticket_messages",
        "donation_tickets",
        "donations",
        "user_role_assignments",
        "users",
        "user_roles",
    ):
        op.drop_table(table)
