# followgraph/services/user_directory.py
"""Display names and profile URLs for users."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from followgraph.core.config import settings
from followgraph.models.user import User

logger = logging.getLogger(__name__)


class UserDirectory:
    """Resolve user ids to display names and profile links."""

    def __init__(self, db: Session, site_url: Optional[str] = None, members_slug: Optional[str] = None):
        self.db = db
        self.site_url = (site_url or settings.SITE_URL).rstrip("/")
        self.members_slug = members_slug or settings.MEMBERS_SLUG

    def _get(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def display_name(self, user_id: int) -> str:
        user = self._get(user_id)
        if not user:
            logger.debug(f"No user {user_id} for display name")
            return ""
        return user.name

    def user_domain(self, user_id: Optional[int]) -> str:
        """Profile URL with trailing slash, or '' for unknown users."""
        if user_id is None:
            return ""
        user = self._get(user_id)
        if not user:
            return ""
        return f"{self.site_url}/{self.members_slug}/{user.slug}/"

    def notifications_permalink(self, user_id: Optional[int]) -> str:
        domain = self.user_domain(user_id)
        return f"{domain}{settings.NOTIFICATIONS_SLUG}/" if domain else ""
