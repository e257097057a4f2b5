"""Initial revision"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'manuals',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('video_link', sa.String(4095), nullable=False),
        sa.Column('title', sa.String(1023), nullable=False),
        sa.Column('description', sa.UnicodeText(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('thumbnail', sa.String(255), nullable=True),
        sa.UniqueConstraint('order', name='_order_uc'),
        sqlite_autoincrement=True,
    )


def downgrade():
    op.drop_table('manuals')
