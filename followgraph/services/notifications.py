# followgraph/services/notifications.py
"""Format follow notifications for display."""
import html
import logging
from typing import Any, Dict, Optional, Union

from followgraph.core.config import settings
from followgraph.core.context import RequestContext
from followgraph.core.hooks import FollowEvent, FollowFilter, HookRegistry
from followgraph.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

NEW_FOLLOW = "new_follow"


class NotificationFormatter:
    """
    Turns stored notification items into text and a link.

    Returns None when there is nothing to render; callers should then
    suppress the notification.
    """

    def __init__(
        self,
        users: UserDirectory,
        hooks: HookRegistry,
        notifications_active: Optional[bool] = None,
        followers_slug: Optional[str] = None
    ):
        self.users = users
        self.hooks = hooks
        self.notifications_active = settings.NOTIFICATIONS_ACTIVE if notifications_active is None else notifications_active
        self.followers_slug = followers_slug or settings.FOLLOWERS_SLUG

    def format_notification(
        self,
        ctx: RequestContext,
        action: str,
        item_id: int,
        secondary_item_id: Optional[int] = None,
        total_items: int = 1,
        format: str = "string"
    ) -> Union[str, Dict[str, str], None]:
        args = {
            "action": action,
            "item_id": item_id,
            "secondary_item_id": secondary_item_id,
            "total_items": total_items,
            "format": format,
        }
        self.hooks.do_action(FollowEvent.FORMAT_NOTIFICATIONS, args)

        if action == NEW_FOLLOW:
            text, link = self._new_follow(ctx, action, item_id, total_items)
        else:
            link = self.hooks.apply_filters(FollowFilter.NOTIFICATION_LINK, None, args, tag=action)
            text = self.hooks.apply_filters(FollowFilter.NOTIFICATION_TEXT, None, args, tag=action)

        if not link or not text:
            logger.debug(f"Nothing to render for notification {action} ({item_id})")
            return None

        context: Dict[str, Any] = dict(args, link=link, text=text)
        if format == "string":
            markup = f'<a href="{html.escape(link, quote=True)}">{html.escape(text, quote=False)}</a>'
            return self.hooks.apply_filters(FollowFilter.NOTIFICATION_STRING, markup, context)

        return self.hooks.apply_filters(FollowFilter.NOTIFICATION_ARRAY, {"text": text, "link": link}, context)

    def _new_follow(self, ctx: RequestContext, action: str, item_id: int, total_items: int):
        if total_items == 1:
            name = self.users.display_name(item_id)
            domain = self.users.user_domain(item_id)
            text = f"{name} is now following you" if name else None
            link = f"{domain}?bpf_read" if domain else None
            return text, link

        text = f"{total_items} more users are now following you"
        if self.notifications_active:
            link = self.users.notifications_permalink(ctx.loggedin_user_id)
            # filter notifications by 'new_follow' action
            link = f"{link}?action={action}" if link else None
        else:
            domain = self.users.user_domain(ctx.loggedin_user_id)
            link = f"{domain}{self.followers_slug}/?new" if domain else None
        return text, link
