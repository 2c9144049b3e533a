"""Surgical workflow engine - all tables, indexes, and constraints.

Revision ID: 0001_surgical_workflow
Revises:
Create Date: 2026-03-02

Creates:
- patients, users
- surgical_cases (with optimistic version counter)
- case_plans, case_consents, case_images
- surgical_checklists
- surgical_procedure_records
- theaters, theater_bookings
- clinical_audit_events
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001_surgical_workflow'
down_revision = None
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    # ==========================================================================
    # people
    # ==========================================================================
    op.create_table(
        'patients',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('file_number', sa.String(50), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('allergies', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('file_number'),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('role', sa.String(50), nullable=False),
        sa.Column('specialization', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    # ==========================================================================
    # surgical_cases
    # ==========================================================================
    op.create_table(
        'surgical_cases',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('patient_id', sa.Uuid(), nullable=False),
        sa.Column('primary_surgeon_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('urgency', sa.String(20), nullable=False),
        sa.Column('diagnosis', sa.Text(), nullable=True),
        sa.Column('procedure_name', sa.String(255), nullable=True),
        sa.Column('side', sa.String(20), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['patient_id'], ['patients.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['primary_surgeon_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_surgical_cases_status', 'surgical_cases', ['status'])
    op.create_index('idx_surgical_cases_patient', 'surgical_cases', ['patient_id'])
    op.create_index('idx_surgical_cases_surgeon', 'surgical_cases', ['primary_surgeon_id'])

    # ==========================================================================
    # case plans
    # ==========================================================================
    op.create_table(
        'case_plans',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('surgical_case_id', sa.Uuid(), nullable=False),
        sa.Column('procedure_plan', sa.Text(), nullable=True),
        sa.Column('risk_factors', sa.Text(), nullable=True),
        sa.Column('pre_op_notes', sa.Text(), nullable=True),
        sa.Column('planned_anesthesia', sa.String(100), nullable=True),
        sa.Column('estimated_duration_minutes', sa.Integer(), nullable=True),
        sa.Column('ready_for_surgery', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['surgical_case_id'], ['surgical_cases.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('surgical_case_id'),
    )

    op.create_table(
        'case_consents',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('case_plan_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('signed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['case_plan_id'], ['case_plans.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'case_images',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('case_plan_id', sa.Uuid(), nullable=False),
        sa.Column('timepoint', sa.String(20), nullable=False),
        sa.Column('file_url', sa.String(1024), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['case_plan_id'], ['case_plans.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    # ==========================================================================
    # WHO checklist
    # ==========================================================================
    phase_columns = []
    for prefix in ('sign_in', 'time_out', 'sign_out'):
        phase_columns += [
            sa.Column(f'{prefix}_completed_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column(f'{prefix}_by_user_id', sa.String(64), nullable=True),
            sa.Column(f'{prefix}_by_role', sa.String(50), nullable=True),
            sa.Column(f'{prefix}_items', JSON_TYPE, nullable=True),
        ]
    op.create_table(
        'surgical_checklists',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('surgical_case_id', sa.Uuid(), nullable=False),
        *phase_columns,
        *_timestamps(),
        sa.ForeignKeyConstraint(['surgical_case_id'], ['surgical_cases.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('surgical_case_id'),
    )

    # ==========================================================================
    # operative record
    # ==========================================================================
    op.create_table(
        'surgical_procedure_records',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('surgical_case_id', sa.Uuid(), nullable=False),
        sa.Column('pre_op_diagnosis', sa.Text(), nullable=False),
        sa.Column('urgency', sa.String(20), nullable=False),
        sa.Column('wheels_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('anesthesia_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('incision_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('closure_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('anesthesia_end', sa.DateTime(timezone=True), nullable=True),
        sa.Column('wheels_out', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['surgical_case_id'], ['surgical_cases.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('surgical_case_id'),
    )

    # ==========================================================================
    # theaters
    # ==========================================================================
    op.create_table(
        'theaters',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('type', sa.String(50), nullable=True),
        sa.Column('color_code', sa.String(20), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'theater_bookings',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('theater_id', sa.Uuid(), nullable=False),
        sa.Column('surgical_case_id', sa.Uuid(), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['theater_id'], ['theaters.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['surgical_case_id'], ['surgical_cases.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'idx_theater_bookings_theater_start', 'theater_bookings', ['theater_id', 'start_time']
    )
    op.create_index('idx_theater_bookings_case', 'theater_bookings', ['surgical_case_id'])

    # ==========================================================================
    # clinical_audit_events (append-only)
    # ==========================================================================
    op.create_table(
        'clinical_audit_events',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('actor_id', sa.String(64), nullable=False),
        sa.Column('actor_role', sa.String(50), nullable=False),
        sa.Column('action_type', sa.String(50), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.String(64), nullable=False),
        sa.Column('details', JSON_TYPE, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'idx_clinical_audit_entity',
        'clinical_audit_events',
        ['entity_type', 'entity_id', 'created_at'],
    )
    op.create_index(
        'idx_clinical_audit_actor_created', 'clinical_audit_events', ['actor_id', 'created_at']
    )


def downgrade() -> None:
    op.drop_table('clinical_audit_events')
    op.drop_table('theater_bookings')
    op.drop_table('theaters')
    op.drop_table('surgical_procedure_records')
    op.drop_table('surgical_checklists')
    op.drop_table('case_images')
    op.drop_table('case_consents')
    op.drop_table('case_plans')
    op.drop_table('surgical_cases')
    op.drop_table('users')
    op.drop_table('patients')
