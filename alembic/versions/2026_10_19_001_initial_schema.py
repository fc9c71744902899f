"""Initial schema: users, locations, shifts

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

ACTIVE_SHIFT_CONDITION = sa.text("status = 'IN_PROGRESS'")


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('profile_pic_url', sa.String(1000), nullable=True),
        sa.Column('role', sa.Enum('CAREWORKER', 'MANAGER', name='userrole'), nullable=False),
        sa.Column('total_shifts', sa.Integer(), nullable=False),
        sa.Column('average_hours', sa.Float(), nullable=False),
        sa.Column('last_clock_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'locations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('radius', sa.Float(), nullable=False),
        sa.Column('start_time', sa.String(50), nullable=False),
        sa.Column('end_time', sa.String(50), nullable=False),
        sa.Column('created_by', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_locations_name', 'locations', ['name'])
    op.create_index('ix_locations_created_by', 'locations', ['created_by'])

    op.create_table(
        'shifts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('location_id', sa.Uuid(), sa.ForeignKey('locations.id'), nullable=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('day', sa.String(20), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('total_hours', sa.Float(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('SCHEDULED', 'IN_PROGRESS', 'COMPLETED', 'MISSED', name='shiftstatus'),
            nullable=False,
        ),
        sa.Column('note', sa.String(2000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_shifts_user_id', 'shifts', ['user_id'])
    op.create_index('ix_shifts_location_id', 'shifts', ['location_id'])
    op.create_index('ix_shifts_status', 'shifts', ['status'])

    # At most one IN_PROGRESS shift per user
    op.create_index(
        'uq_shift_user_in_progress',
        'shifts',
        ['user_id'],
        unique=True,
        sqlite_where=ACTIVE_SHIFT_CONDITION,
        postgresql_where=ACTIVE_SHIFT_CONDITION,
    )


def downgrade():
    op.drop_index('uq_shift_user_in_progress', 'shifts')
    op.drop_index('ix_shifts_status', 'shifts')
    op.drop_index('ix_shifts_location_id', 'shifts')
    op.drop_index('ix_shifts_user_id', 'shifts')
    op.drop_table('shifts')

    op.drop_index('ix_locations_created_by', 'locations')
    op.drop_index('ix_locations_name', 'locations')
    op.drop_table('locations')

    op.drop_index('ix_users_role', 'users')
    op.drop_index('ix_users_email', 'users')
    op.drop_table('users')

    sa.Enum(name='shiftstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
