from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from review_engine.database import Base
from review_engine.domain.peer_nomination import NominationStatus
from review_engine.models.mixins import SoftDeleteColumns, unique_while_live


class PeerNomination(SoftDeleteColumns, Base):
    __tablename__ = "peer_nominations"

    id = Column(String(36), primary_key=True, index=True)
    cycle_id = Column(String(36), ForeignKey("review_cycles.id"), nullable=False, index=True)
    nominator_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    nominee_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String, nullable=False, default=NominationStatus.PENDING.value)
    decline_reason = Column(Text, nullable=True)
    nominated_at = Column(DateTime(timezone=True), nullable=False)
    responded_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        unique_while_live("uq_peer_nomination_triple", "cycle_id", "nominator_id", "nominee_id"),
    )
