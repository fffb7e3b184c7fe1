"""Follow relationship model for the follow graph."""
from sqlalchemy import Column, Integer, String, DateTime, Index, UniqueConstraint
from sqlalchemy.sql import func

from followgraph.db.base_class import Base


class Follow(Base):
    """A follower following a leader, optionally scoped to a follow type.

    An empty `follow_type` means user follows user. Other values namespace
    followable objects (e.g. 'blogs'), in which case `leader_id` is the id of
    that object rather than a user.
    """

    __tablename__ = "follows"

    id = Column(Integer, primary_key=True, index=True)
    leader_id = Column(Integer, nullable=False)
    follower_id = Column(Integer, nullable=False)
    follow_type = Column(String(75), nullable=False, default="", server_default="")
    date_recorded = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # One relationship per (leader, follower, type)
    __table_args__ = (
        UniqueConstraint('leader_id', 'follower_id', 'follow_type', name='_leader_follower_type_uc'),
        Index('ix_follows_leader_type', 'leader_id', 'follow_type'),
        Index('ix_follows_follower_type', 'follower_id', 'follow_type'),
    )

    def __repr__(self):
        return (
            f"<Follow(leader_id={self.leader_id}, follower_id={self.follower_id}, "
            f"follow_type={self.follow_type!r})>"
        )
