# alembic/versions/0001_initial.py

"""Initial tables: users, pets, reminders

Revision ID: 0001_initial
Revises:
Create Date: 2025-04-24 15:50:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Creates the initial schema."""
    # Пользователи (id = sub токена)
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=128), primary_key=True, comment="External subject id"),
        sa.Column('email', sa.String(length=255), nullable=True, comment="User email"),
        sa.Column('name', sa.String(length=128), nullable=True, comment="User display name"),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_users_id', 'users', ['id'], unique=False)
    op.create_index('ix_users_email', 'users', ['email'], unique=False)

    # Питомцы
    op.create_table(
        'pets',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=128), sa.ForeignKey('users.id', ondelete='CASCADE', name='fk_pets_user_id'), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('breed', sa.String(length=128), nullable=True),
        sa.Column('gender', sa.String(length=32), nullable=True),
        sa.Column('age', sa.String(length=32), nullable=True),
        sa.Column('color', sa.String(length=64), nullable=True),
        sa.Column('height', sa.String(length=32), nullable=True),
        sa.Column('weight', sa.String(length=32), nullable=True),
        sa.Column('image_url', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_pets_user_id', 'pets', ['user_id'], unique=False)

    # Напоминания
    op.create_table(
        'reminders',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=128), sa.ForeignKey('users.id', ondelete='CASCADE', name='fk_reminders_user_id'), nullable=False),
        sa.Column('pet_name', sa.String(length=128), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('due_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('external_calendar_ref', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_reminders_user_id', 'reminders', ['user_id'], unique=False)
    op.create_index('ix_reminders_due_at', 'reminders', ['due_at'], unique=False)
    op.create_index('ix_reminders_is_completed', 'reminders', ['is_completed'], unique=False)
    op.create_index('ix_reminders_user_due_at', 'reminders', ['user_id', 'due_at'], unique=False)


def downgrade() -> None:
    """Reverts the initial schema creation."""
    # Удаляем в обратном порядке создания
    op.drop_index('ix_reminders_user_due_at', table_name='reminders')
    op.drop_index('ix_reminders_is_completed', table_name='reminders')
    op.drop_index('ix_reminders_due_at', table_name='reminders')
    op.drop_index('ix_reminders_user_id', table_name='reminders')
    op.drop_table('reminders')
    op.drop_index('ix_pets_user_id', table_name='pets')
    op.drop_table('pets')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
