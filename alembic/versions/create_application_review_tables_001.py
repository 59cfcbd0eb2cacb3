"""Create designer application review tables

This migration adds:
1. designer_applications table (status constrained to new/reviewing/approved/rejected)
2. brands table
3. profiles table (id shared with the auth provider identity)

Revision ID: create_application_review_tables_001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = 'create_application_review_tables_001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # 1. Designer applications
    op.create_table('designer_applications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('brand_name', sa.String(255), nullable=False),
        sa.Column('designer_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50)),
        sa.Column('website', sa.String(500)),
        sa.Column('instagram', sa.String(255)),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('year_founded', sa.Integer),
        sa.Column('status',
                  sa.Enum('new', 'reviewing', 'approved', 'rejected', name='application_status'),
                  nullable=False,
                  server_default='new'),
        sa.Column('notes', sa.Text),
        sa.Column('reviewed_by', sa.String(36)),
        sa.Column('reviewed_at', sa.DateTime),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_designer_applications_email', 'designer_applications', ['email'])
    op.create_index('ix_designer_applications_brand_email', 'designer_applications', ['brand_name', 'email'])

    # 2. Brands
    op.create_table('brands',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('contact_email', sa.String(255)),
        sa.Column('description', sa.Text),
        sa.Column('long_description', sa.Text),
        sa.Column('location', sa.String(255)),
        sa.Column('category', sa.String(100)),
        sa.Column('categories', sa.JSON),
        sa.Column('price_range', sa.String(100)),
        sa.Column('website', sa.String(500)),
        sa.Column('instagram', sa.String(255)),
        sa.Column('whatsapp', sa.String(50)),
        sa.Column('founded_year', sa.Integer),
        sa.Column('image', sa.String(500)),
        sa.Column('is_verified', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('rating', sa.Float, server_default='0'),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_brands_name_contact_email', 'brands', ['name', 'contact_email'])

    # 3. Profiles
    op.create_table('profiles',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255)),
        sa.Column('first_name', sa.String(255)),
        sa.Column('role',
                  sa.Enum('user', 'brand_admin', 'admin', 'super_admin', name='profile_role'),
                  nullable=False,
                  server_default='user'),
        sa.Column('owned_brands', sa.JSON),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'])


def downgrade():
    op.drop_index('ix_profiles_email', table_name='profiles')
    op.drop_table('profiles')
    op.drop_index('ix_brands_name_contact_email', table_name='brands')
    op.drop_table('brands')
    op.drop_index('ix_designer_applications_brand_email', table_name='designer_applications')
    op.drop_index('ix_designer_applications_email', table_name='designer_applications')
    op.drop_table('designer_applications')
    sa.Enum(name='profile_role').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='application_status').drop(op.get_bind(), checkfirst=True)
