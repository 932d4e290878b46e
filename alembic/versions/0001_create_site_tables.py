"""create admins, blog, testimonial, galeri and analitik tables

Revision ID: 0001_create_site_tables
Revises: 
Create Date: 2026-10-18 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_create_site_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('nama', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f('ix_admins_id'), 'admins', ['id'])
    op.create_index(op.f('ix_admins_email'), 'admins', ['email'], unique=True)

    op.create_table(
        'blog',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('judul', sa.String(length=255), nullable=False),
        sa.Column('ringkasan', sa.Text(), nullable=False),
        sa.Column('konten', sa.Text(), nullable=False),
        sa.Column('gambar_url', sa.String(length=500), nullable=True),
        sa.Column('kategori', sa.String(length=100), nullable=True),
        sa.Column('penulis', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('tanggal_publikasi', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f('ix_blog_id'), 'blog', ['id'])
    op.create_index(op.f('ix_blog_slug'), 'blog', ['slug'], unique=True)
    op.create_index('ix_blog_kategori', 'blog', ['kategori'])
    op.create_index('ix_blog_tanggal_publikasi', 'blog', ['tanggal_publikasi'])

    op.create_table(
        'testimonial',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('nama', sa.String(length=255), nullable=False),
        sa.Column('peran', sa.String(length=255), nullable=True),
        sa.Column('pesan', sa.Text(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('gambar_url', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='menunggu'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_testimonial_rating_range'),
        sa.CheckConstraint("status IN ('menunggu', 'disetujui', 'ditolak')", name='ck_testimonial_status'),
    )
    op.create_index(op.f('ix_testimonial_id'), 'testimonial', ['id'])
    op.create_index('ix_testimonial_status_created', 'testimonial', ['status', 'created_at'])

    op.create_table(
        'galeri',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('judul', sa.String(length=255), nullable=False),
        sa.Column('lokasi', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('deskripsi', sa.Text(), nullable=True),
        sa.Column('gambar_url', sa.String(length=500), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f('ix_galeri_id'), 'galeri', ['id'])

    op.create_table(
        'analitik',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('visitor_id', sa.String(length=64), nullable=False),
        sa.Column('halaman', sa.String(length=500), nullable=False),
        sa.Column('referrer', sa.String(length=255), nullable=True),
        sa.Column('ua_browser', sa.String(length=50), nullable=True),
        sa.Column('ua_os', sa.String(length=50), nullable=True),
        sa.Column('ip_bucket', sa.String(length=80), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(op.f('ix_analitik_id'), 'analitik', ['id'])
    op.create_index('ix_analitik_created', 'analitik', ['created_at'])
    op.create_index('ix_analitik_halaman_created', 'analitik', ['halaman', 'created_at'])


def downgrade():
    op.drop_table('analitik')
    op.drop_table('galeri')
    op.drop_table('testimonial')
    op.drop_table('blog')
    op.drop_index(op.f('ix_admins_email'), table_name='admins')
    op.drop_table('admins')
