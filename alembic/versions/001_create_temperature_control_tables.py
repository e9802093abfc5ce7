"""001_create_temperature_control_tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

Crea le tabelle del sistema di controllo temperature:
- users (autenticazione e ruoli)
- products (catalogo con range di temperatura)
- temperature_forms (form con ciclo di vita e version)
- temperature_records (letture)
- temperature_alerts (alert con snapshot del range)
- audit_logs (tracciabilità HACCP)
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _base_columns():
    """id, timestamp e soft delete comuni a ogni tabella"""
    return [
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    ]


def _base_indexes(table: str) -> None:
    op.create_index(f'ix_{table}_created_at', table, ['created_at'])
    op.create_index(f'ix_{table}_is_deleted', table, ['is_deleted'])


def upgrade() -> None:
    """Crea tabelle base"""

    # =====================================================
    # 1. USERS
    # =====================================================
    op.create_table(
        'users',
        *_base_columns(),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('phone_number', sa.String(20), nullable=True),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('refresh_token', sa.String(255), nullable=True),
        sa.Column('refresh_token_expires_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "role IN ('Operator', 'Supervisor', 'Administrator', 'Auditor')",
            name='chk_user_role_valid'
        ),
    )
    _base_indexes('users')
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_refresh_token', 'users', ['refresh_token'], unique=True)

    # =====================================================
    # 2. PRODUCTS
    # =====================================================
    op.create_table(
        'products',
        *_base_columns(),
        sa.Column('product_code', sa.String(20), nullable=False),
        sa.Column('product_name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('min_temperature', sa.Numeric(5, 2), nullable=False),
        sa.Column('max_temperature', sa.Numeric(5, 2), nullable=False),
        sa.Column('max_defrost_time_minutes', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.CheckConstraint('min_temperature < max_temperature', name='chk_product_range_order'),
        sa.CheckConstraint('min_temperature BETWEEN -100 AND 100', name='chk_product_min_temperature'),
        sa.CheckConstraint('max_temperature BETWEEN -100 AND 100', name='chk_product_max_temperature'),
        sa.CheckConstraint('max_defrost_time_minutes BETWEEN 1 AND 1440', name='chk_product_defrost_time'),
    )
    _base_indexes('products')
    op.create_index('ix_products_product_code', 'products', ['product_code'], unique=True)
    op.create_index('ix_products_is_active', 'products', ['is_active'])

    # =====================================================
    # 3. TEMPERATURE FORMS
    # =====================================================
    op.create_table(
        'temperature_forms',
        *_base_columns(),
        sa.Column('form_number', sa.String(30), nullable=False),
        sa.Column('destination', sa.String(200), nullable=False),
        sa.Column('defrost_date', sa.Date(), nullable=False),
        sa.Column('production_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('observations', sa.Text(), nullable=True),
        sa.Column('attachment_urls', sa.Text(), nullable=True),
        sa.Column('geo_location', sa.Text(), nullable=True),
        sa.Column('created_by_signature', sa.Text(), nullable=True),
        sa.Column('reviewed_by_signature', sa.Text(), nullable=True),
        sa.Column('created_by_user_id', sa.Uuid(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('reviewed_by_user_id', sa.Uuid(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('review_notes', sa.Text(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "status IN ('Draft', 'Completed', 'Reviewed', 'Rejected', 'Archived')",
            name='chk_form_status_valid'
        ),
    )
    _base_indexes('temperature_forms')
    op.create_index('ix_temperature_forms_form_number', 'temperature_forms', ['form_number'], unique=True)
    op.create_index('ix_temperature_forms_status', 'temperature_forms', ['status'])
    op.create_index('ix_temperature_forms_created_by_user_id', 'temperature_forms', ['created_by_user_id'])

    # =====================================================
    # 4. TEMPERATURE RECORDS
    # =====================================================
    op.create_table(
        'temperature_records',
        *_base_columns(),
        sa.Column('form_id', sa.Uuid(as_uuid=True),
                  sa.ForeignKey('temperature_forms.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Uuid(as_uuid=True),
                  sa.ForeignKey('products.id', ondelete='SET NULL'), nullable=True),
        sa.Column('car_number', sa.Integer(), nullable=False),
        sa.Column('product_code', sa.String(20), nullable=False),
        sa.Column('product_temperature', sa.Numeric(5, 2), nullable=False),
        sa.Column('defrost_start_time', sa.Time(), nullable=True),
        sa.Column('consumption_start_time', sa.Time(), nullable=True),
        sa.Column('consumption_end_time', sa.Time(), nullable=True),
        sa.Column('observations', sa.Text(), nullable=True),
        sa.Column('record_order', sa.Integer(), nullable=False),
        sa.Column('has_alert', sa.Boolean(), nullable=False),
        sa.CheckConstraint('car_number >= 1', name='chk_record_car_number_positive'),
        sa.CheckConstraint('product_temperature BETWEEN -100 AND 100', name='chk_record_temperature_range'),
    )
    _base_indexes('temperature_records')
    op.create_index('ix_temperature_records_form_id', 'temperature_records', ['form_id'])
    op.create_index('ix_temperature_records_product_id', 'temperature_records', ['product_id'])
    op.create_index('ix_temperature_records_product_code', 'temperature_records', ['product_code'])

    # =====================================================
    # 5. TEMPERATURE ALERTS
    # =====================================================
    op.create_table(
        'temperature_alerts',
        *_base_columns(),
        sa.Column('form_id', sa.Uuid(as_uuid=True),
                  sa.ForeignKey('temperature_forms.id', ondelete='CASCADE'), nullable=False),
        sa.Column('record_id', sa.Uuid(as_uuid=True),
                  sa.ForeignKey('temperature_records.id', ondelete='SET NULL'), nullable=True),
        sa.Column('acknowledged_by_user_id', sa.Uuid(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('severity', sa.String(20), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('temperature', sa.Numeric(5, 2), nullable=False),
        sa.Column('expected_min_temperature', sa.Numeric(5, 2), nullable=False),
        sa.Column('expected_max_temperature', sa.Numeric(5, 2), nullable=False),
        sa.Column('is_acknowledged', sa.Boolean(), nullable=False),
        sa.Column('acknowledged_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "severity IN ('Info', 'Warning', 'Critical', 'Emergency')",
            name='chk_alert_severity_valid'
        ),
    )
    _base_indexes('temperature_alerts')
    op.create_index('ix_temperature_alerts_form_id', 'temperature_alerts', ['form_id'])
    op.create_index('ix_temperature_alerts_record_id', 'temperature_alerts', ['record_id'])
    op.create_index('ix_temperature_alerts_severity', 'temperature_alerts', ['severity'])
    op.create_index('ix_temperature_alerts_is_acknowledged', 'temperature_alerts', ['is_acknowledged'])

    # =====================================================
    # 6. AUDIT LOGS
    # =====================================================
    op.create_table(
        'audit_logs',
        *_base_columns(),
        sa.Column('user_id', sa.Uuid(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('entity_name', sa.String(100), nullable=False),
        sa.Column('entity_id', sa.Uuid(as_uuid=True), nullable=True),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
    )
    _base_indexes('audit_logs')
    op.create_index('ix_audit_logs_user_id', 'audit_logs', ['user_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_entity_name', 'audit_logs', ['entity_name'])
    op.create_index('ix_audit_logs_entity_id', 'audit_logs', ['entity_id'])


def downgrade() -> None:
    """Drop tabelle in ordine inverso per le foreign key"""
    op.drop_table('audit_logs')
    op.drop_table('temperature_alerts')
    op.drop_table('temperature_records')
    op.drop_table('temperature_forms')
    op.drop_table('products')
    op.drop_table('users')
