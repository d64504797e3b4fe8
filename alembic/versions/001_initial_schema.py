"""initial schema: statuses, candidates, teams, recruiter activity

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

COUNTER_COLUMNS = (
    "jobs_assigned",
    "profiles_submitted",
    "internal_reject",
    "internal_hold",
    "sent_to_client",
    "client_reject",
    "client_hold",
    "client_duplicate",
    "technical",
    "technical_selected",
    "technical_reject",
    "l1",
    "l1_selected",
    "l1_reject",
    "l2",
    "l2_reject",
    "end_client",
    "end_client_reject",
    "offers_made",
    "offers_accepted",
    "offers_rejected",
    "joined",
    "no_show",
)


def _scoped_columns():
    """id, organization_id and timestamps shared by every organization-scoped table."""
    return [
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("organization_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _index(table: str, *columns: str) -> None:
    op.create_index(f"ix_{table}_{'_'.join(columns)}", table, list(columns), unique=False)


def upgrade() -> None:
    op.create_table(
        "organization",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "job_status",
        *_scoped_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(length=20), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("type", sa.String(length=10), nullable=False),
        sa.Column("parent_id", sa.Uuid(), sa.ForeignKey("job_status.id", ondelete="RESTRICT"), nullable=True),
    )
    _index("job_status", "organization_id")
    _index("job_status", "type")
    _index("job_status", "parent_id")

    op.create_table(
        "candidate",
        *_scoped_columns(),
        sa.Column("job_id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("skills", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=True, server_default="New"),
        sa.Column("main_status_id", sa.Uuid(), sa.ForeignKey("job_status.id", ondelete="SET NULL"), nullable=True),
        sa.Column("sub_status_id", sa.Uuid(), sa.ForeignKey("job_status.id", ondelete="SET NULL"), nullable=True),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("updated_by", sa.String(length=255), nullable=True),
    )
    _index("candidate", "organization_id")
    _index("candidate", "job_id")
    _index("candidate", "main_status_id")
    _index("candidate", "sub_status_id")

    op.create_table(
        "candidate_timeline",
        *_scoped_columns(),
        sa.Column("candidate_id", sa.Uuid(), sa.ForeignKey("candidate.id", ondelete="CASCADE"), nullable=False),
        sa.Column("event_type", sa.String(length=50), nullable=False),
        sa.Column("created_by", sa.String(length=255), nullable=False, server_default="System"),
        sa.Column("previous_state", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("new_state", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("event_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    )
    _index("candidate_timeline", "organization_id")
    _index("candidate_timeline", "candidate_id")

    op.create_table(
        "team",
        *_scoped_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("team_type", sa.String(length=20), nullable=False),
        sa.Column("parent_team_id", sa.Uuid(), sa.ForeignKey("team.id", ondelete="RESTRICT"), nullable=True),
        sa.Column("level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("department_id", sa.Uuid(), nullable=True),
        sa.Column("lead_employee_id", sa.Uuid(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    _index("team", "organization_id")
    _index("team", "team_type")
    _index("team", "parent_team_id")

    op.create_table(
        "team_permission",
        *_scoped_columns(),
        sa.Column("team_id", sa.Uuid(), sa.ForeignKey("team.id", ondelete="CASCADE"), nullable=False),
        sa.Column("permission_key", sa.String(length=100), nullable=False),
        sa.Column("permission_value", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint("team_id", "permission_key", name="uq_team_permission_team_key"),
    )
    _index("team_permission", "organization_id")
    _index("team_permission", "team_id")

    op.create_table(
        "team_audit_log",
        *_scoped_columns(),
        sa.Column("team_id", sa.Uuid(), sa.ForeignKey("team.id", ondelete="CASCADE"), nullable=False),
        sa.Column("action_type", sa.String(length=50), nullable=False),
        sa.Column("action_details", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("performed_by", sa.String(length=255), nullable=True),
    )
    _index("team_audit_log", "organization_id")
    _index("team_audit_log", "team_id")

    op.create_table(
        "recruiter_activity",
        *_scoped_columns(),
        sa.Column("recruiter", sa.String(length=255), nullable=False),
        sa.Column("activity_date", sa.Date(), nullable=False),
        *[sa.Column(name, sa.Integer(), nullable=False, server_default="0") for name in COUNTER_COLUMNS],
        sa.UniqueConstraint("organization_id", "recruiter", "activity_date", name="uq_recruiter_activity_day"),
    )
    _index("recruiter_activity", "organization_id")
    _index("recruiter_activity", "recruiter")
    _index("recruiter_activity", "activity_date")


def downgrade() -> None:
    for table in (
        "recruiter_activity",
        "team_audit_log",
        "team_permission",
        "team",
        "candidate_timeline",
        "candidate",
        "job_status",
        "organization",
    ):
        op.drop_table(table)
