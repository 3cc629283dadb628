"""Create roof, inspection and seasonal preference read-model tables

Revision ID: a1c4e7f20b93
Revises:
Create Date: 2025-06-02 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c4e7f20b93'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Roofs table
    op.create_table(
        'roofs',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('client_id', sa.String(36), nullable=True),
        sa.Column('property_name', sa.String(255), nullable=False),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(50), nullable=True),
        sa.Column('market', sa.String(100), nullable=True),
        sa.Column('region', sa.String(100), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('roof_area', sa.Float(), nullable=True),
        sa.Column('roof_type', sa.String(50), nullable=True),
        sa.Column('roof_age', sa.Integer(), nullable=True),
        sa.Column('roof_rating', sa.Float(), nullable=True),
        sa.Column('property_manager_name', sa.String(255), nullable=True),
        sa.Column('property_manager_email', sa.String(255), nullable=True),
        sa.Column('property_manager_phone', sa.String(50), nullable=True),
        sa.Column('safety_concerns', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('customer_sensitivity', sa.String(20), nullable=True),
        sa.Column('warranty_expiration', sa.Date(), nullable=True),
        sa.Column('last_inspection_date', sa.Date(), nullable=True),
        sa.Column('last_maintenance_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("roof_rating IS NULL OR roof_rating BETWEEN 1 AND 10", name='ck_roofs_rating'),
    )
    op.create_index('idx_roofs_client', 'roofs', ['client_id'])
    op.create_index('idx_roofs_region', 'roofs', ['region'])

    # Inspections table
    op.create_table(
        'inspections',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('roof_id', sa.String(36), nullable=False),
        sa.Column('inspection_type', sa.String(30), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='scheduled'),
        sa.Column('scheduled_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('weather_conditions', sa.String(255), nullable=True),
        sa.Column('weather_damage', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['roof_id'], ['roofs.id']),
        sa.CheckConstraint(
            "status IN ('scheduled', 'in_progress', 'completed', 'cancelled')",
            name='ck_inspections_status',
        ),
    )
    op.create_index('idx_inspections_roof', 'inspections', ['roof_id'])
    op.create_index('idx_inspections_completed', 'inspections', ['completed_date'])

    # Inspection reports table
    op.create_table(
        'inspection_reports',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('inspection_id', sa.String(36), nullable=False),
        sa.Column('findings', sa.Text(), nullable=True),
        sa.Column('recommendations', sa.Text(), nullable=True),
        sa.Column('priority_level', sa.String(10), nullable=True),
        sa.Column('estimated_cost', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['inspection_id'], ['inspections.id'], ondelete='CASCADE'),
    )
    op.create_index('idx_inspection_reports_inspection', 'inspection_reports', ['inspection_id'])

    # Seasonal preferences table
    op.create_table(
        'seasonal_preferences',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('client_id', sa.String(36), nullable=True),
        sa.Column('region', sa.String(100), nullable=True),
        sa.Column('season', sa.String(10), nullable=True),
        sa.Column('preferred_months', sa.JSON(), nullable=False),
        sa.Column('avoid_conditions', sa.JSON(), nullable=False),
        sa.Column('optimal_temperature_range', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_seasonal_client_region', 'seasonal_preferences', ['client_id', 'region'])


def downgrade() -> None:
    op.drop_table('seasonal_preferences')
    op.drop_table('inspection_reports')
    op.drop_table('inspections')
    op.drop_table('roofs')
