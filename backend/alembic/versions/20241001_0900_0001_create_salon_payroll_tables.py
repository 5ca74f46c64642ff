"""Create staff, attendance and payroll tables

Revision ID: 0001_salon_payroll
Revises:
Create Date: 2024-10-01 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_salon_payroll'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    staff_status = sa.Enum('active', 'inactive', name='staffstatus')
    attendance_status = sa.Enum(
        'present', 'incomplete', 'absent', 'on_leave', 'week_off', name='attendancestatus'
    )
    advance_status = sa.Enum('pending', 'approved', 'rejected', name='advancestatus')
    payout_status = sa.Enum('pending', 'approved', 'rejected', name='payoutstatus')
    rule_type = sa.Enum('daily', 'monthly', 'package', 'gift_card', name='incentiveruletype')
    apply_on = sa.Enum('total_sale_value', 'service_sale_only', name='incentiveapplyon')

    # Staff
    op.create_table('staff_members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=200), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('position', sa.String(length=100), nullable=False),
        sa.Column('fixed_salary', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', staff_status, nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('fixed_salary >= 0', name='ck_staff_fixed_salary_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_staff_members_id', 'staff_members', ['id'])
    op.create_index('ix_staff_members_tenant_id', 'staff_members', ['tenant_id'])
    op.create_index('ix_staff_members_position', 'staff_members', ['position'])

    # Attendance
    op.create_table('attendance_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=False),
        sa.Column('work_date', sa.Date(), nullable=False),
        sa.Column('check_in', sa.DateTime(), nullable=True),
        sa.Column('check_out', sa.DateTime(), nullable=True),
        sa.Column('required_minutes', sa.Integer(), nullable=True),
        sa.Column('total_working_minutes', sa.Integer(), nullable=False),
        sa.Column('overtime_minutes', sa.Integer(), nullable=False),
        sa.Column('is_work_complete', sa.Boolean(), nullable=False),
        sa.Column('status', attendance_status, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['staff_id'], ['staff_members.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'staff_id', 'work_date', name='uq_attendance_staff_day')
    )
    op.create_index('ix_attendance_records_id', 'attendance_records', ['id'])
    op.create_index('ix_attendance_records_tenant_id', 'attendance_records', ['tenant_id'])
    op.create_index('ix_attendance_records_staff_id', 'attendance_records', ['staff_id'])
    op.create_index('ix_attendance_records_work_date', 'attendance_records', ['work_date'])

    op.create_table('attendance_temporary_exits',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('attendance_id', sa.Integer(), nullable=False),
        sa.Column('reason', sa.String(length=500), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['attendance_id'], ['attendance_records.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_attendance_temporary_exits_id', 'attendance_temporary_exits', ['id'])
    op.create_index(
        'ix_attendance_temporary_exits_tenant_id', 'attendance_temporary_exits', ['tenant_id']
    )
    op.create_index(
        'ix_attendance_temporary_exits_attendance_id', 'attendance_temporary_exits', ['attendance_id']
    )

    # Payroll configuration
    op.create_table('payroll_rate_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('default_ot_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('default_extra_day_rate', sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('default_ot_rate >= 0', name='ck_default_ot_rate_non_negative'),
        sa.CheckConstraint(
            'default_extra_day_rate >= 0', name='ck_default_extra_day_rate_non_negative'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', name='uq_payroll_rate_settings_tenant'),
        comment='Default overtime and extra-day rates per tenant'
    )
    op.create_index('ix_payroll_rate_settings_id', 'payroll_rate_settings', ['id'])
    op.create_index('ix_payroll_rate_settings_tenant_id', 'payroll_rate_settings', ['tenant_id'])

    op.create_table('position_rate_overrides',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('position_name', sa.String(length=100), nullable=False),
        sa.Column('ot_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('extra_day_rate', sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('ot_rate >= 0', name='ck_override_ot_rate_non_negative'),
        sa.CheckConstraint('extra_day_rate >= 0', name='ck_override_extra_day_rate_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'position_name', name='uq_position_rate_override'),
        comment='Per-position overtime and extra-day rates'
    )
    op.create_index('ix_position_rate_overrides_id', 'position_rate_overrides', ['id'])
    op.create_index(
        'ix_position_rate_overrides_tenant_id', 'position_rate_overrides', ['tenant_id']
    )

    op.create_table('position_target_hours',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('position_name', sa.String(length=100), nullable=False),
        sa.Column('required_hours', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('required_hours >= 0', name='ck_required_hours_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'position_name', name='uq_position_target_hours'),
        comment='Monthly required hours per position'
    )
    op.create_index('ix_position_target_hours_id', 'position_target_hours', ['id'])
    op.create_index('ix_position_target_hours_tenant_id', 'position_target_hours', ['tenant_id'])

    # Salary and advances
    op.create_table('salary_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('fixed_salary', sa.Numeric(12, 2), nullable=False),
        sa.Column('target_hours', sa.Integer(), nullable=False),
        sa.Column('total_working_hours', sa.Numeric(8, 2), nullable=False),
        sa.Column('regular_hours', sa.Numeric(8, 2), nullable=False),
        sa.Column('hourly_rate', sa.Numeric(14, 6), nullable=False),
        sa.Column('base_salary', sa.Numeric(12, 2), nullable=False),
        sa.Column('ot_hours', sa.Numeric(8, 2), nullable=False),
        sa.Column('ot_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('ot_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('extra_days', sa.Integer(), nullable=False),
        sa.Column('extra_day_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('extra_day_pay', sa.Numeric(12, 2), nullable=False),
        sa.Column('addition', sa.Numeric(12, 2), nullable=False),
        sa.Column('deduction', sa.Numeric(12, 2), nullable=False),
        sa.Column('advance_deducted', sa.Numeric(12, 2), nullable=False),
        sa.Column('total_earnings', sa.Numeric(12, 2), nullable=False),
        sa.Column('total_deductions', sa.Numeric(12, 2), nullable=False),
        sa.Column('net_salary', sa.Numeric(12, 2), nullable=False),
        sa.Column('is_paid', sa.Boolean(), nullable=False),
        sa.Column('paid_date', sa.Date(), nullable=True),
        sa.Column('processed_by', sa.Integer(), nullable=True),
        sa.Column('paid_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('month >= 1 AND month <= 12', name='ck_salary_record_month'),
        sa.ForeignKeyConstraint(['staff_id'], ['staff_members.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'staff_id', 'month', 'year', name='uq_salary_record_period'),
        comment='Monthly salary computations'
    )
    op.create_index('ix_salary_records_id', 'salary_records', ['id'])
    op.create_index('ix_salary_records_tenant_id', 'salary_records', ['tenant_id'])
    op.create_index('ix_salary_records_staff_id', 'salary_records', ['staff_id'])

    op.create_table('advance_payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('repayment_plan', sa.String(length=200), nullable=False),
        sa.Column('status', advance_status, nullable=False),
        sa.Column('request_date', sa.DateTime(), nullable=False),
        sa.Column('approved_date', sa.DateTime(), nullable=True),
        sa.Column('requested_by', sa.Integer(), nullable=True),
        sa.Column('decided_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('amount > 0', name='ck_advance_amount_positive'),
        sa.ForeignKeyConstraint(['staff_id'], ['staff_members.id'], ),
        sa.PrimaryKeyConstraint('id'),
        comment='Staff cash advances'
    )
    op.create_index('ix_advance_payments_id', 'advance_payments', ['id'])
    op.create_index('ix_advance_payments_tenant_id', 'advance_payments', ['tenant_id'])
    op.create_index('ix_advance_payments_staff_id', 'advance_payments', ['staff_id'])
    op.create_index('ix_advance_payments_status', 'advance_payments', ['status'])
    op.create_index('ix_advance_payments_approved_date', 'advance_payments', ['approved_date'])

    # Incentives
    op.create_table('incentive_rules',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('rule_type', rule_type, nullable=False),
        sa.Column('effective_from', sa.DateTime(), nullable=False),
        sa.Column('target_multiplier', sa.Numeric(8, 4), nullable=True),
        sa.Column('target_value', sa.Numeric(12, 2), nullable=True),
        sa.Column('include_service_sale', sa.Boolean(), nullable=False),
        sa.Column('include_product_sale', sa.Boolean(), nullable=False),
        sa.Column('review_name_value', sa.Numeric(10, 2), nullable=False),
        sa.Column('review_photo_value', sa.Numeric(10, 2), nullable=False),
        sa.Column('rate', sa.Numeric(6, 4), nullable=False),
        sa.Column('double_rate', sa.Numeric(6, 4), nullable=False),
        sa.Column('apply_on', apply_on, nullable=False),
        *_timestamps(),
        sa.CheckConstraint('rate >= 0 AND double_rate >= 0', name='ck_incentive_rates_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        comment='Versioned incentive rules'
    )
    op.create_index('ix_incentive_rules_id', 'incentive_rules', ['id'])
    op.create_index('ix_incentive_rules_tenant_id', 'incentive_rules', ['tenant_id'])
    op.create_index('ix_incentive_rules_rule_type', 'incentive_rules', ['rule_type'])
    op.create_index('ix_incentive_rules_effective_from', 'incentive_rules', ['effective_from'])

    op.create_table('daily_sales',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=False),
        sa.Column('sale_date', sa.Date(), nullable=False),
        sa.Column('recorded_at', sa.DateTime(), nullable=False),
        sa.Column('service_sale', sa.Numeric(12, 2), nullable=False),
        sa.Column('product_sale', sa.Numeric(12, 2), nullable=False),
        sa.Column('package_sale', sa.Numeric(12, 2), nullable=False),
        sa.Column('gift_card_sale', sa.Numeric(12, 2), nullable=False),
        sa.Column('reviews_with_name', sa.Integer(), nullable=False),
        sa.Column('reviews_with_photo', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['staff_id'], ['staff_members.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_daily_sales_id', 'daily_sales', ['id'])
    op.create_index('ix_daily_sales_tenant_id', 'daily_sales', ['tenant_id'])
    op.create_index('ix_daily_sales_staff_id', 'daily_sales', ['staff_id'])
    op.create_index('ix_daily_sales_sale_date', 'daily_sales', ['sale_date'])

    op.create_table('incentive_payouts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('status', payout_status, nullable=False),
        sa.Column('processed_date', sa.DateTime(), nullable=True),
        sa.Column('requested_by', sa.Integer(), nullable=True),
        sa.Column('decided_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('amount > 0', name='ck_payout_amount_positive'),
        sa.ForeignKeyConstraint(['staff_id'], ['staff_members.id'], ),
        sa.PrimaryKeyConstraint('id'),
        comment='Incentive payout claims'
    )
    op.create_index('ix_incentive_payouts_id', 'incentive_payouts', ['id'])
    op.create_index('ix_incentive_payouts_tenant_id', 'incentive_payouts', ['tenant_id'])
    op.create_index('ix_incentive_payouts_staff_id', 'incentive_payouts', ['staff_id'])
    op.create_index('ix_incentive_payouts_status', 'incentive_payouts', ['status'])


def downgrade():
    for table in (
        'incentive_payouts',
        'daily_sales',
        'incentive_rules',
        'advance_payments',
        'salary_records',
        'position_target_hours',
        'position_rate_overrides',
        'payroll_rate_settings',
        'attendance_temporary_exits',
        'attendance_records',
        'staff_members',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_name in (
        'incentiveapplyon',
        'incentiveruletype',
        'payoutstatus',
        'advancestatus',
        'attendancestatus',
        'staffstatus',
    ):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
