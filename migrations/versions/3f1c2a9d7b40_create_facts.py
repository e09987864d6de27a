"""create_facts

Create the OnlyFacts schema:
- Facts (content, publish time, denormalized agree/disagree tallies, version)
- Fact votes (voter ledger, one row per voter per fact)

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create ENUM type (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE vote_choice AS ENUM ('agree', 'disagree');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # FACTS table
    # ========================================================================
    op.create_table(
        "facts",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "published_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column("agrees", sa.Integer(), server_default="0", nullable=False),
        sa.Column("disagrees", sa.Integer(), server_default="0", nullable=False),
        sa.Column("version", sa.Integer(), server_default="0", nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("agrees >= 0", name="agrees_non_negative"),
        sa.CheckConstraint("disagrees >= 0", name="disagrees_non_negative"),
        sa.CheckConstraint("length(content) > 0", name="content_not_empty"),
    )
    # Current fact lookup: ORDER BY published_at DESC LIMIT 1
    op.create_index(
        "idx_facts_published_at",
        "facts",
        [sa.text("published_at DESC")],
    )

    # ========================================================================
    # FACT_VOTES table
    # ========================================================================
    op.create_table(
        "fact_votes",
        sa.Column("fact_id", sa.UUID(), nullable=False),
        sa.Column("voter_id", sa.String(length=255), nullable=False),
        sa.Column(
            "choice",
            postgresql.ENUM("agree", "disagree", name="vote_choice", create_type=False),
            nullable=False,
        ),
        sa.Column(
            "voted_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["fact_id"], ["facts.id"], ondelete="CASCADE"),
        # One vote per voter per fact; also serves lookups by fact_id
        sa.UniqueConstraint("fact_id", "voter_id", name="unique_fact_voter"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("fact_votes")
    op.drop_index("idx_facts_published_at", table_name="facts")
    op.drop_table("facts")
    op.execute("DROP TYPE IF EXISTS vote_choice")
