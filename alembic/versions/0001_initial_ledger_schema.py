"""initial ledger schema

Revision ID: 0001_initial_ledger_schema
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_ledger_schema'
down_revision = None
branch_labels = None
depends_on = None

currency_enum = sa.Enum('ARS', 'USD', name='currency')
origin_kind_enum = sa.Enum('one_off', 'recurring', 'automatic_debit', 'installment', name='originkind')
card_type_enum = sa.Enum('debit', 'credit', 'virtual', name='cardtype')
rate_source_enum = sa.Enum('manual', 'api_dolar_api', 'api_bcra', 'api_other', name='ratesource')


def _catalog(name):
    op.create_table(
        name,
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100 if name != 'frequencies' else 50), nullable=False, unique=True),
    )


def _source_references():
    return [
        sa.Column('category_id', sa.Integer, sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('importance_id', sa.Integer, sa.ForeignKey('importances.id'), nullable=True),
        sa.Column('payment_type_id', sa.Integer, sa.ForeignKey('payment_types.id'), nullable=True),
        sa.Column('card_id', sa.Integer, sa.ForeignKey('cards.id'), nullable=True),
    ]


def _scheduled_source(name):
    op.create_table(
        name,
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, nullable=False, index=True),
        sa.Column('description', sa.String(255), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('origin_currency', currency_enum, nullable=False),
        sa.Column('amount_ars', sa.Numeric(12, 2), nullable=True),
        sa.Column('amount_usd', sa.Numeric(12, 2), nullable=True),
        sa.Column('reference_rate', sa.Numeric(12, 2), nullable=True),
        sa.Column('payment_day', sa.Integer, nullable=False),
        sa.Column('payment_month', sa.Integer, nullable=True),
        sa.Column('frequency_id', sa.Integer, sa.ForeignKey('frequencies.id'), nullable=True),
        *_source_references(),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('start_date', sa.Date, nullable=True),
        sa.Column('end_date', sa.Date, nullable=True),
        sa.Column('last_generated_date', sa.Date, nullable=True),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
    )


def upgrade():
    for name in ('categories', 'importances', 'payment_types', 'frequencies'):
        _catalog(name)

    op.create_table(
        'cards',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, nullable=False, index=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('bank', sa.String(100), nullable=True),
        sa.Column('card_type', card_type_enum, nullable=False),
        sa.Column('closing_day', sa.Integer, nullable=True),
        sa.Column('due_day', sa.Integer, nullable=True),
    )

    op.create_table(
        'exchange_rates',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('date', sa.Date, nullable=False, unique=True, index=True),
        sa.Column('buy_rate', sa.Numeric(12, 2), nullable=False),
        sa.Column('sell_rate', sa.Numeric(12, 2), nullable=False),
        sa.Column('source', rate_source_enum, nullable=False),
        sa.Column('notes', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
        sa.CheckConstraint('sell_rate >= buy_rate', name='ck_exchange_rates_sell_gte_buy'),
    )

    op.create_table(
        'one_off_expenses',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, nullable=False, index=True),
        sa.Column('description', sa.String(255), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('origin_currency', currency_enum, nullable=False),
        sa.Column('reference_rate', sa.Numeric(12, 2), nullable=True),
        *_source_references(),
        sa.Column('processed', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
    )

    _scheduled_source('recurring_expenses')
    _scheduled_source('automatic_debits')

    op.create_table(
        'purchases',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, nullable=False, index=True),
        sa.Column('description', sa.String(255), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('installment_count', sa.Integer, nullable=False, server_default='1'),
        sa.Column('purchase_date', sa.Date, nullable=False),
        sa.Column('origin_currency', currency_enum, nullable=False),
        *_source_references(),
        sa.Column('pending_installments', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('last_installment_date', sa.Date, nullable=True),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
    )

    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, nullable=False, index=True),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('description', sa.String(255), nullable=False),
        sa.Column('amount_ars', sa.Numeric(12, 2), nullable=True),
        sa.Column('amount_usd', sa.Numeric(12, 2), nullable=True),
        sa.Column('origin_currency', currency_enum, nullable=False),
        sa.Column('exchange_rate_used', sa.Numeric(12, 2), nullable=True),
        sa.Column('category_id', sa.Integer, sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('importance_id', sa.Integer, sa.ForeignKey('importances.id'), nullable=False),
        sa.Column('payment_type_id', sa.Integer, sa.ForeignKey('payment_types.id'), nullable=False),
        sa.Column('card_id', sa.Integer, sa.ForeignKey('cards.id'), nullable=True),
        sa.Column('frequency_id', sa.Integer, sa.ForeignKey('frequencies.id'), nullable=True),
        sa.Column('total_installments', sa.Integer, nullable=True),
        sa.Column('paid_installments', sa.Integer, nullable=True),
        sa.Column('origin_kind', origin_kind_enum, nullable=False),
        sa.Column('origin_id', sa.Integer, nullable=False),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_expenses_origin', 'expenses', ['origin_kind', 'origin_id'])


def downgrade():
    op.drop_index('ix_expenses_origin', table_name='expenses')
    for name in (
        'expenses', 'purchases', 'automatic_debits', 'recurring_expenses', 'one_off_expenses',
        'exchange_rates', 'cards', 'frequencies', 'payment_types', 'importances', 'categories',
    ):
        op.drop_table(name)
    for enum in (origin_kind_enum, rate_source_enum, card_type_enum, currency_enum):
        enum.drop(op.get_bind(), checkfirst=True)
