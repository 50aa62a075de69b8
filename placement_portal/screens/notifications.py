"""Notification inbox shared by every role."""
from __future__ import annotations

from placement_portal.notifications import badge_text, notification_url
from placement_portal.routes import Route, resolve
from placement_portal.screens.base import Screen


class Notifications(Screen):
    name = "notifications"
    title = "notifications"

    def __init__(self, api, role: str = ""):
        self.role = role
        super().__init__(api)

    def default_filters(self):
        return {"read": "all"}

    def query_params(self):
        read = self.filters.get("read")
        if read == "unread":
            return {"read": "false"}
        if read == "read":
            return {"read": "true"}
        return {}

    def fetchers(self):
        return {"items": lambda: (self.api.notifications.list(self.params()).data or {}).get("notifications") or []}

    def matches(self, n):
        read = self.filters.get("read")
        if read == "unread":
            return not n.get("read")
        if read == "read":
            return bool(n.get("read"))
        return True

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.items if not n.get("read"))

    @property
    def badge(self) -> str:
        return badge_text(self.unread_count)

    def url_for(self, notification) -> str | None:
        return notification_url(notification, self.role)

    def route_for(self, notification) -> Route | None:
        """The page this notification opens, or None when it has no page here."""
        return resolve(self.url_for(notification), self.role)

    def mark_read(self, notification_id: str) -> bool:
        return self.mutate(self.api.notifications.mark_read, notification_id)

    def mark_all_read(self) -> bool:
        return self.mutate(self.api.notifications.mark_all_read,
                           success="All notifications marked as read")

    def delete(self, notification_id: str) -> bool:
        return self.mutate(self.api.notifications.delete, notification_id,
                           success="Notification deleted")

    def clear_read(self) -> bool:
        return self.mutate(self.api.notifications.clear_read, success="Read notifications cleared")
