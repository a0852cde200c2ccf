"""create admissions tables

Revision ID: a0b1c2d3e4f5
Revises:
Create Date: 2026-10-17 09:00:00.000000

This migration:
1. Creates the admission_status enum type
2. Creates the applications table (one row per submitted admission form)
3. Creates the application_documents table, cascading on application delete
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a0b1c2d3e4f5"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create applications and application_documents tables."""
    admission_status_enum = postgresql.ENUM(
        "pending",
        "under_review",
        "approved",
        "rejected",
        "enrolled",
        name="admission_status",
        create_type=False,
    )
    admission_status_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "applications",
        # Primary key and timestamps (from BaseModel)
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("surname", sa.String(length=100), nullable=False),
        sa.Column("learner_name", sa.String(length=100), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("place_of_birth", sa.String(length=100), nullable=False),
        sa.Column("grade_applying", sa.String(length=20), nullable=False),
        sa.Column("year", sa.String(length=10), nullable=False),
        sa.Column("last_grade_passed", sa.String(length=20), nullable=True),
        sa.Column("has_repeated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("repeated_grade", sa.String(length=20), nullable=True),
        sa.Column("mother_full_name", sa.String(length=200), nullable=True),
        sa.Column("mother_address", sa.Text(), nullable=True),
        sa.Column("mother_home_phone", sa.String(length=30), nullable=True),
        sa.Column("mother_work_phone", sa.String(length=30), nullable=True),
        sa.Column("mother_cell_phone", sa.String(length=30), nullable=True),
        sa.Column("father_full_name", sa.String(length=200), nullable=True),
        sa.Column("father_address", sa.Text(), nullable=True),
        sa.Column("father_home_phone", sa.String(length=30), nullable=True),
        sa.Column("father_work_phone", sa.String(length=30), nullable=True),
        sa.Column("father_cell_phone", sa.String(length=30), nullable=True),
        sa.Column("responsible_party_name", sa.String(length=200), nullable=True),
        sa.Column("responsible_party_address", sa.Text(), nullable=True),
        sa.Column("responsible_party_relationship", sa.String(length=100), nullable=True),
        sa.Column("responsible_party_home_phone", sa.String(length=30), nullable=True),
        sa.Column("responsible_party_work_phone", sa.String(length=30), nullable=True),
        sa.Column("responsible_party_cell_phone", sa.String(length=30), nullable=True),
        sa.Column("learner_address", sa.Text(), nullable=True),
        sa.Column("religious_denomination", sa.String(length=100), nullable=True),
        sa.Column("is_baptised", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("parish_church", sa.String(length=200), nullable=True),
        sa.Column("refugee_status", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("home_language", sa.String(length=100), nullable=True),
        sa.Column("number_of_children", sa.String(length=10), nullable=True),
        sa.Column("children_ages", sa.String(length=100), nullable=True),
        sa.Column("siblings_at_school", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sibling_name", sa.String(length=200), nullable=True),
        sa.Column("sibling_grade", sa.String(length=20), nullable=True),
        sa.Column("mother_occupation", sa.String(length=100), nullable=True),
        sa.Column("mother_place_of_employment", sa.String(length=200), nullable=True),
        sa.Column("mother_work_tel", sa.String(length=30), nullable=True),
        sa.Column("mother_work_cell", sa.String(length=30), nullable=True),
        sa.Column("mother_email", sa.String(length=255), nullable=True),
        sa.Column("father_occupation", sa.String(length=100), nullable=True),
        sa.Column("father_place_of_employment", sa.String(length=200), nullable=True),
        sa.Column("father_work_tel", sa.String(length=30), nullable=True),
        sa.Column("father_work_cell", sa.String(length=30), nullable=True),
        sa.Column("father_email", sa.String(length=255), nullable=True),
        sa.Column("responsible_party_occupation", sa.String(length=100), nullable=True),
        sa.Column("responsible_party_place_of_employment", sa.String(length=200), nullable=True),
        sa.Column("responsible_party_work_tel", sa.String(length=30), nullable=True),
        sa.Column("responsible_party_work_cell", sa.String(length=30), nullable=True),
        sa.Column("responsible_party_email", sa.String(length=255), nullable=True),
        sa.Column("self_employed_details", sa.Text(), nullable=True),
        sa.Column("marital_status", sa.String(length=50), nullable=True),
        sa.Column("current_school", sa.String(length=200), nullable=True),
        sa.Column("current_school_address", sa.Text(), nullable=True),
        sa.Column("current_school_tel", sa.String(length=30), nullable=False),
        sa.Column("current_school_contact", sa.String(length=200), nullable=False),
        sa.Column("payment_method", sa.String(length=50), nullable=False),
        sa.Column("agree_to_terms", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("agree_to_privacy", sa.Boolean(), nullable=False, server_default=sa.false()),
        # Status tracking
        sa.Column(
            "status",
            admission_status_enum,
            server_default="pending",
            nullable=False,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "submitted_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_applications_status", "applications", ["status"])
    op.create_index("ix_applications_submitted_at", "applications", ["submitted_at"])
    op.create_index(
        "ix_applications_surname_learner_name",
        "applications",
        ["surname", "learner_name"],
    )

    op.create_table(
        "application_documents",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("original_name", sa.String(length=255), nullable=False),
        sa.Column("file_path", sa.String(length=500), nullable=False),
        sa.Column("file_type", sa.String(length=100), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("document_type", sa.String(length=50), nullable=False),
        sa.Column(
            "uploaded_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["application_id"],
            ["applications.id"],
            name="fk_application_documents_application_id",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_application_documents_application_id",
        "application_documents",
        ["application_id"],
    )


def downgrade() -> None:
    """Drop admissions tables and the status enum."""
    op.drop_index("ix_application_documents_application_id", table_name="application_documents")
    op.drop_table("application_documents")

    op.drop_index("ix_applications_surname_learner_name", table_name="applications")
    op.drop_index("ix_applications_submitted_at", table_name="applications")
    op.drop_index("ix_applications_status", table_name="applications")
    op.drop_table("applications")

    postgresql.ENUM(name="admission_status").drop(op.get_bind(), checkfirst=True)
