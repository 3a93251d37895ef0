from sqlalchemy import Column, Integer, DateTime, Index, text


class PillarScoreColumns:
    """The five pillar rating columns, shared by every table that stores scores."""
    project_impact = Column(Integer, nullable=False, default=0)
    direction = Column(Integer, nullable=False, default=0)
    engineering_excellence = Column(Integer, nullable=False, default=0)
    operational_ownership = Column(Integer, nullable=False, default=0)
    people_impact = Column(Integer, nullable=False, default=0)


class SoftDeleteColumns:
    # Rows are never physically removed; repositories filter on deleted_at.
    deleted_at = Column(DateTime(timezone=True), nullable=True)


def unique_while_live(name: str, *columns: str) -> Index:
    """Unique index over rows that have not been soft deleted."""
    live = text("deleted_at IS NULL")
    return Index(name, *columns, unique=True, sqlite_where=live, postgresql_where=live)
