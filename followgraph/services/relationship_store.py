# followgraph/services/relationship_store.py
"""
Relationship storage for the follow graph.

`RelationshipStore` is the interface the follow facade consumes, so the SQL
table can be swapped for another backend. `SQLAlchemyRelationshipStore`
keeps relationships in the `follows` table.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from followgraph.models.follow import Follow
from followgraph.schemas.follow import FollowQuery

logger = logging.getLogger(__name__)


class RelationshipStore(ABC):
    """Abstract interface for follow relationship storage."""

    @abstractmethod
    def create(self, leader_id: int, follower_id: int, follow_type: str, recorded_at: datetime) -> bool:
        """Persist a relationship. False if it exists already or the write failed."""

    @abstractmethod
    def delete(self, leader_id: int, follower_id: int, follow_type: str) -> bool:
        """Remove a relationship. False if there was none or the write failed."""

    @abstractmethod
    def find(self, leader_id: int, follower_id: int, follow_type: str) -> Optional[int]:
        """Id of the matching relationship, or None."""

    @abstractmethod
    def list_followers(self, leader_id: int, follow_type: str, query: Optional[FollowQuery] = None) -> List[int]:
        """Ordered ids of everyone following `leader_id`."""

    @abstractmethod
    def list_following(self, follower_id: int, follow_type: str, query: Optional[FollowQuery] = None) -> List[int]:
        """Ordered ids of everything `follower_id` follows."""

    @abstractmethod
    def count_followers(self, leader_id: int, follow_type: str) -> int:
        pass

    @abstractmethod
    def count_following(self, follower_id: int, follow_type: str) -> int:
        pass


class SQLAlchemyRelationshipStore(RelationshipStore):
    """Relationship store backed by the `follows` table."""

    def __init__(self, db: Session):
        self.db = db

    def _get(self, leader_id: int, follower_id: int, follow_type: str) -> Optional[Follow]:
        return self.db.query(Follow).filter(
            and_(
                Follow.leader_id == leader_id,
                Follow.follower_id == follower_id,
                Follow.follow_type == follow_type
            )
        ).first()

    def find(self, leader_id: int, follower_id: int, follow_type: str) -> Optional[int]:
        follow = self._get(leader_id, follower_id, follow_type)
        return follow.id if follow else None

    def create(self, leader_id: int, follower_id: int, follow_type: str, recorded_at: datetime) -> bool:
        if self._get(leader_id, follower_id, follow_type):
            return False

        follow = Follow(
            leader_id=leader_id,
            follower_id=follower_id,
            follow_type=follow_type,
            date_recorded=recorded_at or datetime.now(timezone.utc)
        )

        try:
            self.db.add(follow)
            self.db.commit()
            return True

        except IntegrityError:
            # Lost a race with a concurrent insert of the same triple
            self.db.rollback()
            logger.info(f"Follow {leader_id}<-{follower_id} ({follow_type or 'user'}) already recorded")
            return False

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving follow {leader_id}<-{follower_id}: {str(e)}")
            return False

    def delete(self, leader_id: int, follower_id: int, follow_type: str) -> bool:
        follow = self._get(leader_id, follower_id, follow_type)
        if not follow:
            return False

        try:
            self.db.delete(follow)
            self.db.commit()
            return True

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting follow {leader_id}<-{follower_id}: {str(e)}")
            return False

    def list_followers(self, leader_id: int, follow_type: str, query: Optional[FollowQuery] = None) -> List[int]:
        q = self.db.query(Follow.follower_id).filter(
            Follow.leader_id == leader_id,
            Follow.follow_type == follow_type
        )
        q = self._apply_query(q, query, Follow.follower_id)
        return [row[0] for row in q.all()]

    def list_following(self, follower_id: int, follow_type: str, query: Optional[FollowQuery] = None) -> List[int]:
        q = self.db.query(Follow.leader_id).filter(
            Follow.follower_id == follower_id,
            Follow.follow_type == follow_type
        )
        q = self._apply_query(q, query, Follow.leader_id)
        return [row[0] for row in q.all()]

    def count_followers(self, leader_id: int, follow_type: str) -> int:
        return self.db.query(func.count(Follow.id)).filter(
            Follow.leader_id == leader_id,
            Follow.follow_type == follow_type
        ).scalar() or 0

    def count_following(self, follower_id: int, follow_type: str) -> int:
        return self.db.query(func.count(Follow.id)).filter(
            Follow.follower_id == follower_id,
            Follow.follow_type == follow_type
        ).scalar() or 0

    @staticmethod
    def _apply_query(q, query: Optional[FollowQuery], id_column):
        query = query or FollowQuery()

        if query.since is not None:
            q = q.filter(Follow.date_recorded >= query.since)
        if query.until is not None:
            q = q.filter(Follow.date_recorded <= query.until)
        if query.exclude_ids:
            q = q.filter(id_column.notin_(query.exclude_ids))

        column = Follow.date_recorded if query.order_by == "date_recorded" else Follow.id
        # Tie-break on id so date ordering is stable
        if query.order == "DESC":
            q = q.order_by(column.desc(), Follow.id.desc())
        else:
            q = q.order_by(column.asc(), Follow.id.asc())

        if query.per_page:
            page = query.page or 1
            q = q.offset((page - 1) * query.per_page).limit(query.per_page)

        return q
