"""Initial schema - all tables

Revision ID: 001
Revises: 
Create Date: 2025-03-01 00:00:00.000000

This migration creates all initial tables for Obrador:
- roles: Permission bundles
- users: Accounts (identity and role names)
- user_sessions: Session tokens
- timesheets: Submitted shifts with derived minutes
- movements: Audit trail
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from obrador.config import get_settings

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

settings = get_settings()
SCHEMA = settings.db_schema


def _fk(table: str) -> str:
    return f'{SCHEMA}.{table}' if SCHEMA else table


def upgrade() -> None:
    if SCHEMA:
        op.execute(f"IF NOT EXISTS (SELECT * FROM sys.schemas WHERE name = '{SCHEMA}') EXEC('CREATE SCHEMA {SCHEMA}')")
    
    op.create_table(
        'roles',
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('description', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('name'),
        schema=SCHEMA,
    )
    
    op.create_table(
        'users',
        sa.Column('user_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=40), nullable=False),
        sa.Column('display_name', sa.String(length=80), nullable=True),
        sa.Column('roles', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('user_id'),
        schema=SCHEMA,
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True, schema=SCHEMA)
    
    op.create_table(
        'user_sessions',
        sa.Column('session_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('session_token', sa.String(length=64), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_activity_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], [f"{_fk('users')}.user_id"], name='fk_user_sessions_user'),
        sa.PrimaryKeyConstraint('session_id'),
        schema=SCHEMA,
    )
    op.create_index('ix_user_sessions_session_token', 'user_sessions', ['session_token'], unique=True, schema=SCHEMA)
    op.create_index('ix_user_sessions_user_id', 'user_sessions', ['user_id'], schema=SCHEMA)
    op.create_index('ix_user_sessions_user_active', 'user_sessions', ['user_id', 'is_active'], schema=SCHEMA)
    
    op.create_table(
        'timesheets',
        sa.Column('timesheet_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=40), nullable=False),
        sa.Column('user_display_name', sa.String(length=80), nullable=False),
        sa.Column('date', sa.String(length=10), nullable=False),
        sa.Column('start_time', sa.String(length=5), nullable=False),
        sa.Column('end_time', sa.String(length=5), nullable=False),
        sa.Column('start_minutes', sa.Integer(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('night_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_holiday', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('holiday_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('client', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('task', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('work_order', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('search_text', sa.String(length=1000), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_by_name', sa.String(length=80), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.Column('updated_by_name', sa.String(length=80), nullable=True),
        sa.PrimaryKeyConstraint('timesheet_id'),
        schema=SCHEMA,
    )
    op.create_index('ix_timesheets_user_id', 'timesheets', ['user_id'], schema=SCHEMA)
    op.create_index('ix_timesheets_user_date', 'timesheets', ['user_id', 'date'], schema=SCHEMA)
    op.create_index('ix_timesheets_date_start', 'timesheets', ['date', 'start_minutes'], schema=SCHEMA)
    
    op.create_table(
        'movements',
        sa.Column('movement_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('entity', sa.String(length=50), nullable=False),
        sa.Column('entity_id', sa.String(length=64), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('by', sa.String(length=80), nullable=False, server_default='system'),
        sa.Column('at', sa.DateTime(), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('movement_id'),
        schema=SCHEMA,
    )
    op.create_index('ix_movements_entity', 'movements', ['entity', 'entity_id'], schema=SCHEMA)
    op.create_index('ix_movements_at', 'movements', ['at'], schema=SCHEMA)


def downgrade() -> None:
    op.drop_table('movements', schema=SCHEMA)
    op.drop_table('timesheets', schema=SCHEMA)
    op.drop_table('user_sessions', schema=SCHEMA)
    op.drop_table('users', schema=SCHEMA)
    op.drop_table('roles', schema=SCHEMA)
