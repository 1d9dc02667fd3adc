# app/services/identity_service.py

import asyncio
from typing import Callable, Optional

from loguru import logger

from app.models.user import UserRole
from app.schemas.auth import AuthIdentity, Principal, Resolution, ResolutionStatus
from app.services.document_store import DocumentStore
from app.services.notification_service import NotificationService


def infer_demo_role(email: str | None) -> UserRole:
    """E-mail based role guess. Only used in demo mode."""
    value = (email or "").lower()
    if "admin" in value or "direcao" in value:
        return UserRole.Direction
    if "funcionario" in value:
        return UserRole.Staff
    return UserRole.Student


class IdentityResolver:
    """
    Turns a provider identity into a Principal by reading the profile
    stored under the same uid.
    """

    def __init__(self, store: DocumentStore, demo_fallback: bool = False):
        self.store = store
        self.demo_fallback = demo_fallback

    def _synthesize(self, identity: AuthIdentity) -> Principal:
        role = infer_demo_role(identity.email) if self.demo_fallback else UserRole.Student
        email = identity.email or ""
        return Principal(
            id=identity.uid,
            name=identity.display_name or email.split("@")[0] or "Usuário",
            email=email,
            role=role,
            is_active=True,
        )

    async def resolve(self, identity: Optional[AuthIdentity]) -> Resolution:
        if identity is None:
            return Resolution(status=ResolutionStatus.SignedOut)

        try:
            profile = await self.store.get_user_profile(identity.uid)
        except Exception:
            logger.exception("Profile lookup failed for {}; using default principal", identity.uid)
            return Resolution(status=ResolutionStatus.Fallback, principal=self._synthesize(identity))

        if profile is None:
            if self.demo_fallback:
                principal = self._synthesize(identity)
                logger.warning(
                    "No profile for {}; demo mode grants role '{}'", identity.uid, principal.role.value
                )
                return Resolution(status=ResolutionStatus.Demo, principal=principal)
            logger.info("No profile for {}", identity.uid)
            return Resolution(status=ResolutionStatus.MissingProfile)

        if not profile.get("isActive", False):
            logger.warning("Account {} is deactivated", identity.uid)
            return Resolution(status=ResolutionStatus.Deactivated)

        principal = Principal(
            id=profile["id"],
            name=profile["name"],
            email=profile["email"],
            role=profile["role"],
            is_active=True,
        )
        return Resolution(status=ResolutionStatus.Active, principal=principal)


PrincipalListener = Callable[[Resolution], None]


class PrincipalSession:
    """
    Holds the current Principal of one client session.

    Attach it to an auth channel; every sign-in/sign-out starts a new
    resolution and cancels the one still in flight, so only the latest
    event is ever committed.
    """

    def __init__(
        self,
        resolver: IdentityResolver,
        notifications: Optional[NotificationService] = None,
    ):
        self.resolver = resolver
        self.notifications = notifications
        self.resolution = Resolution(status=ResolutionStatus.SignedOut)
        self.loading = False
        self._task: Optional[asyncio.Task] = None
        self._side_tasks: set[asyncio.Task] = set()
        self._listeners: list[PrincipalListener] = []

    @property
    def principal(self) -> Optional[Principal]:
        return self.resolution.principal

    def attach(self, channel) -> Callable[[], None]:
        return channel.on_auth_state_change(self.handle_auth_event)

    def add_listener(self, listener: PrincipalListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def handle_auth_event(self, identity: Optional[AuthIdentity]) -> asyncio.Task:
        if self._task and not self._task.done():
            self._task.cancel()
        self.loading = True
        self._task = asyncio.get_running_loop().create_task(self._resolve_and_commit(identity))
        return self._task

    async def wait(self) -> Resolution:
        """Wait for the latest transition to settle."""
        while self._task and not self._task.done():
            try:
                await asyncio.shield(self._task)
            except asyncio.CancelledError:
                # superseded; loop picks up the newer task
                if asyncio.current_task().cancelling():
                    raise
        return self.resolution

    async def _resolve_and_commit(self, identity: Optional[AuthIdentity]) -> None:
        resolution = await self.resolver.resolve(identity)

        # a newer event replaced this task while resolve() was suspended
        if asyncio.current_task() is not self._task:
            return

        self.resolution = resolution
        self.loading = False
        for listener in list(self._listeners):
            listener(resolution)

        if resolution.principal and self.notifications:
            side = asyncio.get_running_loop().create_task(self._request_notifications(resolution.principal))
            self._side_tasks.add(side)
            side.add_done_callback(self._side_tasks.discard)

    async def _request_notifications(self, principal: Principal) -> None:
        try:
            await self.notifications.request_permission(principal)
        except Exception:
            logger.exception("Notification permission request failed for {}", principal.id)

    async def close(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
        for task in list(self._side_tasks):
            task.cancel()
