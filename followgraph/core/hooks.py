# followgraph/core/hooks.py
"""
Extension registry for follow events and return-value filters.

Actions notify listeners of something that happened (a follow started,
a notification is about to be formatted). Filters pass a value through a
chain of callables, each of which may replace it.

Every registration can be scoped with a tag: the follow type for
relationship hooks, or the count namespace ("user", "user_blogs", "blogs")
for count hooks. A tag of None listens to every variant; "" listens only
to the plain user-to-user variant.
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

ActionCallback = Callable[[Any], None]
FilterCallback = Callable[[Any, Dict[str, Any]], Any]


class FollowEvent(str, enum.Enum):
    START_FOLLOWING = "bp_follow_start_following"
    STOP_FOLLOWING = "bp_follow_stop_following"
    FORMAT_NOTIFICATIONS = "bp_follow_format_notifications"


class FollowFilter(str, enum.Enum):
    IS_FOLLOWING = "bp_follow_is_following"
    GET_FOLLOWERS = "bp_follow_get_followers"
    GET_FOLLOWING = "bp_follow_get_following"
    FOLLOWER_IDS = "bp_get_follower_ids"
    FOLLOWING_IDS = "bp_get_following_ids"
    TOTAL_FOLLOW_COUNTS = "bp_follow_total_follow_counts"
    FOLLOWING_COUNT = "bp_follow_get_following_count"
    FOLLOWERS_COUNT = "bp_follow_get_followers_count"
    NOTIFICATION_LINK = "bp_follow_extend_notification_link"
    NOTIFICATION_TEXT = "bp_follow_extend_notification_text"
    NOTIFICATION_STRING = "bp_follow_new_followers_notification"
    NOTIFICATION_ARRAY = "bp_follow_new_followers_return_notification"


def hook_name(point: enum.Enum, tag: str = "") -> str:
    """Legacy string name for a hook variant, used in log lines."""
    return f"{point.value}_{tag}" if tag else point.value


@dataclass
class _Registration:
    callback: Callable
    tag: Optional[str]

    def matches(self, tag: str) -> bool:
        return self.tag is None or self.tag == tag


@dataclass
class HookRegistry:
    """Typed observer/interceptor registry."""

    _actions: Dict[FollowEvent, List[_Registration]] = field(default_factory=dict)
    _filters: Dict[FollowFilter, List[_Registration]] = field(default_factory=dict)

    # Actions

    def add_action(self, event: FollowEvent, callback: ActionCallback, tag: Optional[str] = None) -> None:
        self._actions.setdefault(event, []).append(_Registration(callback, tag))

    def remove_action(self, event: FollowEvent, callback: ActionCallback) -> bool:
        return self._remove(self._actions, event, callback)

    def do_action(self, event: FollowEvent, payload: Any = None, tag: str = "") -> int:
        """
        Notify listeners registered for `event` and `tag`.

        A failing listener is logged and skipped; it cannot undo the change
        that triggered the event.

        Returns:
            Number of listeners that ran successfully
        """
        ran = 0
        for registration in list(self._actions.get(event, [])):
            if not registration.matches(tag):
                continue
            try:
                registration.callback(payload)
                ran += 1
            except Exception as e:
                logger.error(f"Listener {registration.callback!r} failed on {hook_name(event, tag)}: {e}")
        return ran

    # Filters

    def add_filter(self, point: FollowFilter, callback: FilterCallback, tag: Optional[str] = None) -> None:
        self._filters.setdefault(point, []).append(_Registration(callback, tag))

    def remove_filter(self, point: FollowFilter, callback: FilterCallback) -> bool:
        return self._remove(self._filters, point, callback)

    def apply_filters(
        self,
        point: FollowFilter,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
        tag: str = ""
    ) -> Any:
        """Run `value` through every matching filter in registration order."""
        context = context or {}
        for registration in list(self._filters.get(point, [])):
            if registration.matches(tag):
                value = registration.callback(value, context)
        return value

    def has_listeners(self, point: enum.Enum, tag: str = "") -> bool:
        table = self._actions if isinstance(point, FollowEvent) else self._filters
        return any(r.matches(tag) for r in table.get(point, []))

    def clear(self) -> None:
        self._actions.clear()
        self._filters.clear()

    @staticmethod
    def _remove(table: Dict[Any, List[_Registration]], point: Any, callback: Callable) -> bool:
        registrations = table.get(point, [])
        for i, registration in enumerate(registrations):
            if registration.callback is callback:
                del registrations[i]
                return True
        return False

