from typing import Optional

from cms_dashboard.configs.settings import settings
from cms_dashboard.schemas.dashboard import DashboardState, UserPreferences
from cms_dashboard.services.dashboard_state_service import DashboardStateStore
from cms_dashboard.services.redis_service import RedisService
from cms_dashboard.utils import get_logger

logger = get_logger(__name__)

SESSION_KEY_PREFIX = "dashboard_session"
PREFERENCES_KEY_PREFIX = "dashboard_preferences"


class StatePersistence:
    """Load and save dashboard state in Redis.

    Session state expires after ``DASHBOARD_SESSION_TTL`` seconds;
    preferences are kept without expiry. Unreadable blobs fall back to
    defaults instead of failing the request.
    """

    def __init__(self, redis: RedisService, session_ttl: Optional[int] = None):
        self.redis = redis
        self.session_ttl = settings.DASHBOARD_SESSION_TTL if session_ttl is None else session_ttl

    @staticmethod
    def session_key(session_id: str) -> str:
        return f"{SESSION_KEY_PREFIX}:{session_id}"

    @staticmethod
    def preferences_key(client_id: str) -> str:
        return f"{PREFERENCES_KEY_PREFIX}:{client_id}"

    async def load_preferences(self, client_id: str) -> UserPreferences:
        return await self.redis.load(self.preferences_key(client_id), UserPreferences) or UserPreferences()

    async def load_state(self, session_id: str, preferences: Optional[UserPreferences] = None) -> DashboardState:
        stored = await self.redis.load(self.session_key(session_id), DashboardState)
        if stored is not None:
            # a stored loading flag belongs to a request that is long gone
            return stored.model_copy(update={"is_loading": False})

        preferences = preferences or UserPreferences()
        return DashboardState(
            current_section=preferences.default_section,
            repository_location=preferences.default_repository,
        )

    async def save_state(self, session_id: str, state: DashboardState) -> bool:
        saved = await self.redis.store(self.session_key(session_id), state, ttl=self.session_ttl)
        if not saved:
            logger.error(f"Failed to persist dashboard state for session {session_id}")
        return saved

    async def save_preferences(self, client_id: str, preferences: UserPreferences) -> bool:
        saved = await self.redis.store(self.preferences_key(client_id), preferences)
        if not saved:
            logger.error(f"Failed to persist preferences for {client_id}")
        return saved

    async def reset_session(self, session_id: str, client_id: str) -> DashboardState:
        """Forget a session's navigation; it restarts from the client's preference defaults"""
        if await self.redis.delete(self.session_key(session_id)):
            logger.info(f"Dashboard session {session_id} reset")
        return await self.load_state(session_id, await self.load_preferences(client_id))

    async def open_store(self, session_id: str, client_id: str) -> DashboardStateStore:
        """Restore a session's store and keep it written through to Redis"""
        preferences = await self.load_preferences(client_id)
        state = await self.load_state(session_id, preferences)
        store = DashboardStateStore(state=state, preferences=preferences)

        async def persist_state(new_state: DashboardState) -> None:
            await self.save_state(session_id, new_state)

        store.subscribe_state(persist_state)
        self._persist_preferences(store, client_id)
        return store

    async def open_preferences_store(self, client_id: str) -> DashboardStateStore:
        """Store for preference changes only; its navigation state is never saved"""
        store = DashboardStateStore(preferences=await self.load_preferences(client_id))
        self._persist_preferences(store, client_id)
        return store

    def _persist_preferences(self, store: DashboardStateStore, client_id: str) -> None:
        async def persist_preferences(new_preferences: UserPreferences) -> None:
            await self.save_preferences(client_id, new_preferences)

        store.subscribe_preferences(persist_preferences)
