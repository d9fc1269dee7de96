"""Initial payroll schema: accounts, RBAC, referentials, companies, employees, contracts, event logs

Revision ID: 001_initial_payroll_schema
Revises:
Create Date: 2026-10-19

"""
from typing import List, Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_payroll_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> List[sa.Column]:
    """created/modified/deleted stamps shared by every soft-deletable table"""
    return [
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.Column('created_by', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('modified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('modified_by', sa.Integer(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_by', sa.Integer(), nullable=True),
    ]


def _index(table: str, *columns: str) -> None:
    for column in columns:
        op.create_index(op.f(f'ix_{table}_{column}'), table, [column], unique=False)


def _active_unique_index(name: str, table: str, columns: List) -> None:
    """Unique among rows that are not soft-deleted"""
    active_rows = sa.text('deleted_at IS NULL')
    op.create_index(
        name, table, columns,
        unique=True, sqlite_where=active_rows, postgresql_where=active_rows,
    )


def _named_lookup(table: str) -> None:
    op.create_table(
        table,
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )
    _index(table, 'id', 'deleted_at')


def _event_log(table: str, subject_column: str, subject_table: str) -> None:
    op.create_table(
        table,
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column(subject_column, sa.Integer(), nullable=False),
        sa.Column('event_name', sa.String(length=100), nullable=False),
        sa.Column('old_value', sa.Text(), nullable=True),
        sa.Column('old_value_id', sa.Integer(), nullable=True),
        sa.Column('new_value', sa.Text(), nullable=True),
        sa.Column('new_value_id', sa.Integer(), nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint([subject_column], [f'{subject_table}.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _index(table, 'id', subject_column, 'event_name', 'created_at')


def upgrade() -> None:
    # Skip if tables already exist (e.g. SQLite database created by create_all())
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    if 'companies' in inspector.get_table_names():
        return

    # Referentials
    op.create_table(
        'countries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('country_name', sa.String(length=500), nullable=False),
        sa.Column('country_name_ar', sa.String(length=500), nullable=True),
        sa.Column('country_code', sa.String(length=3), nullable=False),
        sa.Column('country_phone_code', sa.String(length=10), nullable=False),
        sa.Column('nationality', sa.String(length=500), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )
    _index('countries', 'id', 'country_code', 'deleted_at')

    op.create_table(
        'cities',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('city_name', sa.String(length=500), nullable=False),
        sa.Column('country_id', sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['country_id'], ['countries.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _index('cities', 'id', 'country_id', 'deleted_at')

    for table in ('statuses', 'genders', 'nationalities', 'education_levels', 'marital_statuses'):
        _named_lookup(table)

    # Companies
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_name', sa.String(length=500), nullable=False),
        sa.Column('company_address', sa.String(length=1000), nullable=False),
        sa.Column('city_id', sa.Integer(), nullable=True),
        sa.Column('country_id', sa.Integer(), nullable=True),
        sa.Column('ice_number', sa.String(length=50), nullable=False),
        sa.Column('cnss_number', sa.String(length=50), nullable=False),
        sa.Column('if_number', sa.String(length=50), nullable=False),
        sa.Column('rc_number', sa.String(length=50), nullable=False),
        sa.Column('rib_number', sa.String(length=50), nullable=False),
        sa.Column('phone_number', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('is_cabinet_expert', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['city_id'], ['cities.id'], ),
        sa.ForeignKeyConstraint(['country_id'], ['countries.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _index('companies', 'id', 'company_name', 'city_id', 'country_id', 'deleted_at')

    # Employees
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=200), nullable=False),
        sa.Column('last_name', sa.String(length=200), nullable=False),
        sa.Column('cin_number', sa.String(length=50), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=False),
        sa.Column('manager_id', sa.Integer(), nullable=True),
        sa.Column('status_id', sa.Integer(), nullable=True),
        sa.Column('gender_id', sa.Integer(), nullable=True),
        sa.Column('nationality_id', sa.Integer(), nullable=True),
        sa.Column('education_level_id', sa.Integer(), nullable=True),
        sa.Column('marital_status_id', sa.Integer(), nullable=True),
        sa.Column('cnss_number', sa.String(length=50), nullable=True),
        sa.Column('cimr_number', sa.String(length=50), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ),
        sa.ForeignKeyConstraint(['manager_id'], ['employees.id'], ),
        sa.ForeignKeyConstraint(['status_id'], ['statuses.id'], ),
        sa.ForeignKeyConstraint(['gender_id'], ['genders.id'], ),
        sa.ForeignKeyConstraint(['nationality_id'], ['nationalities.id'], ),
        sa.ForeignKeyConstraint(['education_level_id'], ['education_levels.id'], ),
        sa.ForeignKeyConstraint(['marital_status_id'], ['marital_statuses.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _index(
        'employees', 'id', 'cin_number', 'company_id', 'manager_id', 'status_id', 'gender_id',
        'nationality_id', 'education_level_id', 'marital_status_id', 'deleted_at',
    )

    # Employment
    for table, name_column in (('job_positions', 'name'), ('contract_types', 'contract_type_name')):
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column(name_column, sa.String(length=200), nullable=False),
            sa.Column('company_id', sa.Integer(), nullable=False),
            *_audit_columns(),
            sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        _index(table, 'id', 'company_id', 'deleted_at')

    op.create_table(
        'employee_contracts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=False),
        sa.Column('job_position_id', sa.Integer(), nullable=False),
        sa.Column('contract_type_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id'], ),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ),
        sa.ForeignKeyConstraint(['job_position_id'], ['job_positions.id'], ),
        sa.ForeignKeyConstraint(['contract_type_id'], ['contract_types.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _index(
        'employee_contracts', 'id', 'employee_id', 'company_id', 'job_position_id',
        'contract_type_id', 'deleted_at',
    )

    op.create_table(
        'employee_salaries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('contract_id', sa.Integer(), nullable=False),
        sa.Column('base_salary', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('effective_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id'], ),
        sa.ForeignKeyConstraint(['contract_id'], ['employee_contracts.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _index('employee_salaries', 'id', 'employee_id', 'contract_id', 'deleted_at')

    # Accounts and RBAC
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=True),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _index('users', 'id', 'employee_id', 'username', 'email', 'deleted_at')

    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=False, server_default=''),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )
    _index('roles', 'id', 'name', 'deleted_at')
    _active_unique_index('ux_roles_name_active', 'roles', [sa.text('lower(name)')])

    op.create_table(
        'permissions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('resource', sa.String(length=100), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )
    _index('permissions', 'id', 'name', 'deleted_at')
    _active_unique_index('ux_permissions_name_active', 'permissions', [sa.text('lower(name)')])

    op.create_table(
        'roles_permissions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.Column('permission_id', sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id'], ),
        sa.ForeignKeyConstraint(['permission_id'], ['permissions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _index('roles_permissions', 'id', 'role_id', 'permission_id', 'deleted_at')
    _active_unique_index('ux_roles_permissions_pair_active', 'roles_permissions', ['role_id', 'permission_id'])

    op.create_table(
        'users_roles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _index('users_roles', 'id', 'user_id', 'role_id', 'deleted_at')
    _active_unique_index('ux_users_roles_pair_active', 'users_roles', ['user_id', 'role_id'])

    # Append-only event logs
    _event_log('company_event_logs', 'company_id', 'companies')
    _event_log('employee_event_logs', 'employee_id', 'employees')


def downgrade() -> None:
    for table in (
        'employee_event_logs',
        'company_event_logs',
        'users_roles',
        'roles_permissions',
        'permissions',
        'roles',
        'users',
        'employee_salaries',
        'employee_contracts',
        'contract_types',
        'job_positions',
        'employees',
        'companies',
        'marital_statuses',
        'education_levels',
        'nationalities',
        'genders',
        'statuses',
        'cities',
        'countries',
    ):
        op.drop_table(table)
