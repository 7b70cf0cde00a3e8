from enum import Enum

from cms_dashboard.schemas.dashboard import NavigationMenuItem


class BulkAction(Enum):
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"
    DELETE = "delete"


NAVIGATION_ITEMS = [
    NavigationMenuItem(id="shared-blog", label="Shared Blog", icon="blog", route="/dashboard/shared-blog", order=1),
    NavigationMenuItem(id="file", label="File", icon="folder", route="/dashboard/file", order=2),
    NavigationMenuItem(id="change-logs", label="Change Logs", icon="history", route="/dashboard/change-logs", order=3),
]

REPOSITORY_LOCATIONS = ("Local", "Shared")
