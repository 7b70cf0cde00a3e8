from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable, List, Optional

from cms_dashboard.schemas.dashboard import (
    ContentViewMode, DashboardState, NavigationSection, PreferencesUpdate,
    RepositoryLocation, ThemeMode, UserPreferences
)
from cms_dashboard.schemas.folder import BreadcrumbItem
from cms_dashboard.utils import get_logger

logger = get_logger(__name__)

StateListener = Callable[[DashboardState], Awaitable[None]]
PreferencesListener = Callable[[UserPreferences], Awaitable[None]]


class DashboardStateStore:
    """Navigation, selection and preference state of one dashboard session.

    Every mutator is a coroutine that awaits each registered listener in
    turn before returning, so a persistence listener has written the new
    state by the time the caller sees it. Navigation state and preferences
    have separate listener lists.
    """

    def __init__(self, state: Optional[DashboardState] = None, preferences: Optional[UserPreferences] = None):
        self.preferences = preferences or UserPreferences()
        self.state = state or DashboardState(
            current_section=self.preferences.default_section,
            repository_location=self.preferences.default_repository,
        )
        self._state_listeners: List[StateListener] = []
        self._preferences_listeners: List[PreferencesListener] = []

    def subscribe_state(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def subscribe_preferences(self, listener: PreferencesListener) -> None:
        self._preferences_listeners.append(listener)

    @property
    def current_folder_id(self) -> Optional[str]:
        return self.state.current_folder_id

    async def _commit_state(self, **changes) -> DashboardState:
        changes["last_updated"] = datetime.now(timezone.utc)
        self.state = self.state.model_copy(update=changes)
        for listener in self._state_listeners:
            await listener(self.state)
        return self.state

    async def _commit_preferences(self, **changes) -> UserPreferences:
        self.preferences = self.preferences.model_copy(update=changes)
        for listener in self._preferences_listeners:
            await listener(self.preferences)
        return self.preferences

    # Navigation

    async def set_current_section(self, section: NavigationSection) -> DashboardState:
        return await self._commit_state(current_section=section, breadcrumb_path=[], selected_ids=[])

    async def set_repository_location(self, location: RepositoryLocation) -> DashboardState:
        return await self._commit_state(repository_location=location, breadcrumb_path=[], selected_ids=[])

    async def set_breadcrumb_path(self, path: Iterable[BreadcrumbItem]) -> DashboardState:
        return await self._commit_state(breadcrumb_path=list(path), selected_ids=[])

    async def enter_folder(self, content_item_id: str, display_text: str) -> DashboardState:
        path = list(self.state.breadcrumb_path)
        path.append(BreadcrumbItem(content_item_id=content_item_id, display_text=display_text, level=len(path)))
        return await self._commit_state(breadcrumb_path=path, selected_ids=[])

    async def navigate_to_breadcrumb(self, content_item_id: str) -> bool:
        """Truncate the trail after ``content_item_id``; False if it is not on the trail"""
        path = self.state.breadcrumb_path
        for index, item in enumerate(path):
            if item.content_item_id == content_item_id:
                await self._commit_state(breadcrumb_path=list(path[:index + 1]), selected_ids=[])
                return True
        logger.debug(f"Breadcrumb {content_item_id} is not on the current trail")
        return False

    async def go_home(self) -> DashboardState:
        return await self._commit_state(breadcrumb_path=[], selected_ids=[])

    async def set_loading(self, loading: bool) -> DashboardState:
        return await self._commit_state(is_loading=loading)

    # Selection

    async def toggle_selection(self, content_item_id: str) -> DashboardState:
        selected = list(self.state.selected_ids)
        if content_item_id in selected:
            selected.remove(content_item_id)
        else:
            selected.append(content_item_id)
        return await self._commit_state(selected_ids=selected)

    async def select_all(self, content_item_ids: Iterable[str]) -> DashboardState:
        return await self._commit_state(selected_ids=list(dict.fromkeys(content_item_ids)))

    async def clear_selection(self) -> DashboardState:
        return await self._commit_state(selected_ids=[])

    # Preferences

    async def toggle_sidebar(self) -> UserPreferences:
        return await self._commit_preferences(sidebar_collapsed=not self.preferences.sidebar_collapsed)

    async def set_theme(self, theme: ThemeMode) -> UserPreferences:
        return await self._commit_preferences(theme=theme)

    async def set_content_view_mode(self, mode: ContentViewMode) -> UserPreferences:
        return await self._commit_preferences(content_view_mode=mode)

    async def update_preferences(self, update: PreferencesUpdate) -> UserPreferences:
        return await self._commit_preferences(**update.model_dump(exclude_none=True))
