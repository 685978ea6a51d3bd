"""initial schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.Column('updated_at', sa.BigInteger(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema - create every CMS table."""
    op.create_table(
        'admins',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_admins_email'), 'admins', ['email'], unique=True)
    op.create_index(op.f('ix_admins_created_at'), 'admins', ['created_at'], unique=False)

    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('image', sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_created_at'), 'users', ['created_at'], unique=False)

    op.create_table(
        'categories',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index(op.f('ix_categories_created_at'), 'categories', ['created_at'], unique=False)

    op.create_table(
        'movies',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=False),
        sa.Column('video_source', sa.String(), nullable=False),
        sa.Column('video_path', sa.String(), nullable=True),
        sa.Column('video_url', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('category_id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_movies_category_id'), 'movies', ['category_id'], unique=False)
    op.create_index(op.f('ix_movies_created_at'), 'movies', ['created_at'], unique=False)

    op.create_table(
        'banners',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('image', sa.String(), nullable=False),
        sa.Column('status', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_banners_created_at'), 'banners', ['created_at'], unique=False)

    op.create_table(
        'services',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('discount', sa.Float(), nullable=True),
        sa.Column('fasting_time', sa.String(), nullable=True),
        sa.Column('result_duration', sa.String(), nullable=True),
        sa.Column('sample_type', sa.String(), nullable=True),
        sa.Column('age_group', sa.String(), nullable=True),
        sa.Column('home_sample_collection', sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_services_created_at'), 'services', ['created_at'], unique=False)

    op.create_table(
        'packages',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('discount', sa.Float(), nullable=True),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('includes', sa.JSON(), nullable=False),
        sa.Column('faqs', sa.JSON(), nullable=False),
        sa.Column('service_id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['service_id'], ['services.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_packages_service_id'), 'packages', ['service_id'], unique=False)
    op.create_index(op.f('ix_packages_created_at'), 'packages', ['created_at'], unique=False)

    op.create_table(
        'service_bookings',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('patient_name', sa.String(), nullable=False),
        sa.Column('mobile_number', sa.String(), nullable=False),
        sa.Column('preference', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('time', sa.String(), nullable=False),
        sa.Column('payment_type', sa.String(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('service_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['service_id'], ['services.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_service_bookings_service_id'), 'service_bookings', ['service_id'], unique=False)
    op.create_index(op.f('ix_service_bookings_user_id'), 'service_bookings', ['user_id'], unique=False)
    op.create_index(op.f('ix_service_bookings_created_at'), 'service_bookings', ['created_at'], unique=False)

    op.create_table(
        'enquiries',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('enquiry', sa.Text(), nullable=True),
        sa.Column('phone_number', sa.String(), nullable=False),
        sa.Column('formatted_date', sa.String(), nullable=True),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_enquiries_created_at'), 'enquiries', ['created_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema - drop every CMS table."""
    op.drop_index(op.f('ix_enquiries_created_at'), table_name='enquiries')
    op.drop_table('enquiries')
    op.drop_index(op.f('ix_service_bookings_created_at'), table_name='service_bookings')
    op.drop_index(op.f('ix_service_bookings_user_id'), table_name='service_bookings')
    op.drop_index(op.f('ix_service_bookings_service_id'), table_name='service_bookings')
    op.drop_table('service_bookings')
    op.drop_index(op.f('ix_packages_created_at'), table_name='packages')
    op.drop_index(op.f('ix_packages_service_id'), table_name='packages')
    op.drop_table('packages')
    op.drop_index(op.f('ix_services_created_at'), table_name='services')
    op.drop_table('services')
    op.drop_index(op.f('ix_banners_created_at'), table_name='banners')
    op.drop_table('banners')
    op.drop_index(op.f('ix_movies_created_at'), table_name='movies')
    op.drop_index(op.f('ix_movies_category_id'), table_name='movies')
    op.drop_table('movies')
    op.drop_index(op.f('ix_categories_created_at'), table_name='categories')
    op.drop_table('categories')
    op.drop_index(op.f('ix_users_created_at'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
    op.drop_index(op.f('ix_admins_created_at'), table_name='admins')
    op.drop_index(op.f('ix_admins_email'), table_name='admins')
    op.drop_table('admins')
