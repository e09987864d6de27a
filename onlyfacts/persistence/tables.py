"""SQLAlchemy table definitions for OnlyFacts.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# FACTS TABLE
# ============================================================================
facts_table = Table(
    "facts",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("content", Text, nullable=False),
    Column(
        "published_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    # Denormalized tallies of fact_votes, kept in step by the vote CAS
    Column("agrees", Integer, nullable=False, server_default="0"),
    Column("disagrees", Integer, nullable=False, server_default="0"),
    Column("version", Integer, nullable=False, server_default="0"),
    CheckConstraint("agrees >= 0", name="agrees_non_negative"),
    CheckConstraint("disagrees >= 0", name="disagrees_non_negative"),
    CheckConstraint("length(content) > 0", name="content_not_empty"),
)

Index("idx_facts_published_at", facts_table.c.published_at.desc())

# ============================================================================
# FACT_VOTES TABLE (voter ledger)
# ============================================================================
fact_votes_table = Table(
    "fact_votes",
    metadata,
    Column("fact_id", UUID, ForeignKey("facts.id", ondelete="CASCADE"), nullable=False),
    Column("voter_id", String(255), nullable=False),
    Column(
        "choice",
        Enum("agree", "disagree", name="vote_choice", create_type=False),
        nullable=False,
    ),
    Column(
        "voted_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("fact_id", "voter_id", name="unique_fact_voter"),
)
