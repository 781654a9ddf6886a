"""create users, transactions, budgets, goals and notifications tables

Revision ID: 3f1c9a7d2b64
Revises: 
Create Date: 2026-10-18 09:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b64'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


CATEGORIES = (
    'Food', 'Transportation', 'Entertainment', 'Bills', 'Shopping', 'Healthcare', 'Education',
    'Travel', 'Groceries', 'Utilities', 'Insurance', 'Investment', 'Income', 'Other',
)

category_enum = sa.Enum(*CATEGORIES, name='category')
transaction_type_enum = sa.Enum('income', 'expense', name='transaction_type')
notification_type_enum = sa.Enum('warning', 'success', 'info', name='notification_type')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('db_id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('id', sa.Uuid, nullable=False, unique=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('last_login_at', sa.DateTime, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('email', name='uq_user_email'),
        sa.UniqueConstraint('username', name='uq_user_username'),
    )
    op.create_index('idx_users_email', 'users', ['email'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.db_id'), nullable=False),
        sa.Column('amount', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('category', category_enum, nullable=False),
        sa.Column('transaction_type', transaction_type_enum, nullable=False),
        sa.Column('transaction_date', sa.DateTime, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_transactions_user_date', 'transactions', ['user_id', 'transaction_date'])
    op.create_index('idx_transactions_user_category_type', 'transactions', ['user_id', 'category', 'transaction_type'])

    op.create_table(
        'budgets',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.db_id'), nullable=False),
        # The category type already exists after the transactions table
        sa.Column('category', postgresql.ENUM(*CATEGORIES, name='category', create_type=False), nullable=False),
        sa.Column('amount', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('month', sa.Integer, nullable=False),
        sa.Column('year', sa.Integer, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('user_id', 'category', 'month', 'year', name='uq_user_category_month_year'),
    )
    op.create_index('idx_budgets_user_period', 'budgets', ['user_id', 'year', 'month'])

    op.create_table(
        'goals',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.db_id'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('target_amount', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('current_amount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('target_date', sa.DateTime, nullable=True),
        sa.Column('is_completed', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.db_id'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text, nullable=False),
        sa.Column('notification_type', notification_type_enum, nullable=False),
        sa.Column('is_read', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_notifications_user_created', 'notifications', ['user_id', 'created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('notifications')
    op.drop_table('goals')
    op.drop_table('budgets')
    op.drop_table('transactions')
    op.drop_table('users')
    bind = op.get_bind()
    for enum_type in (notification_type_enum, transaction_type_enum, category_enum):
        enum_type.drop(bind, checkfirst=True)
