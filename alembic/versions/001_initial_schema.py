"""initial schema - users, customers, inquiries, items, cost calculations, audit

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

Creates the tables behind the assignment board. Later revisions should use
explicit op.* calls rather than create_all.
"""
from typing import Sequence, Union

from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    from app.models import Base

    Base.metadata.create_all(bind=op.get_bind(), checkfirst=True)


def downgrade() -> None:
    """Drop all tables (dev/test only)."""
    from app.models import Base

    Base.metadata.drop_all(bind=op.get_bind())
