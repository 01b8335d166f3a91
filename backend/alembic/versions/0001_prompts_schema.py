"""users, prompts, submissions and favorites

Revision ID: 0001_prompts_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op

from app.db.base import Base

# revision identifiers, used by Alembic.
revision = "0001_prompts_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    Base.metadata.create_all(bind=op.get_bind())


def downgrade() -> None:
    Base.metadata.drop_all(bind=op.get_bind())
