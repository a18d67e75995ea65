"""Authentication service for registration, login and session handling."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any
from uuid import UUID

from smarttask_identity.application.context import UserContext
from smarttask_identity.application.policies import LockoutPolicy
from smarttask_identity.domain.shared.time import Clock, utc_now
from smarttask_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    User,
    check_display_name,
)
from smarttask_identity.exceptions import (
    AccountInactiveError,
    AccountLockedError,
    AuthError,
    EmailTakenError,
    InternalAuthError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidPasswordError,
    UserExistsError,
    UserInvalidError,
    UserNotFoundError,
)
from smarttask_identity.schemas import AuthResult, RefreshResult, SessionStats, UserProfile
from smarttask_identity.services.audit import AuditEvent

if TYPE_CHECKING:
    from smarttask_identity.application.services.session_manager import SessionManager
    from smarttask_identity.domain.session import Session
    from smarttask_identity.domain.user import UserRepository
    from smarttask_identity.services import AuditSink, JWTService, PasswordHashingService

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class AuthenticationService:
    """
    Application service for user authentication.

    Orchestrates the user store, password hashing, the session manager and
    JWT minting to provide:
    - User registration
    - Login with password and temporary lockout
    - Access token refresh with replay detection
    - Logout, password change and session management

    One instance is built at process start and shared; it holds only
    configuration and collaborator references.
    """

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        session_manager: SessionManager,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        audit_sink: AuditSink,
        lockout_policy: LockoutPolicy | None = None,
        clock: Clock = utc_now,
    ):
        self._user_repo = user_repository
        self._sessions = session_manager
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._audit = audit_sink
        self._lockout = lockout_policy or LockoutPolicy()
        self._clock = clock

    def _create_access_token(self, user: User) -> str:
        return self._jwt_service.create_access_token(user_id=user.id, email=user.email)

    @contextmanager
    def _internal_errors(self, operation: str, **context: Any) -> Iterator[None]:
        """Let domain errors through; log and mask anything else."""
        try:
            yield
        except AuthError:
            raise
        except Exception as e:
            logger.exception("%s failed (%s)", operation, context)
            raise InternalAuthError from e

    async def register(
        self,
        email: str,
        password: str,
        display_name: str | None = None,
    ) -> AuthResult:
        email_obj = Email(email)
        check_display_name(display_name)

        with self._internal_errors("Registration", email=email_obj.value):
            if await self._user_repo.exists_by_email(email_obj):
                raise UserExistsError

            password_hash = self._password_service.hash(password)
            user = User.create(email_obj, password_hash, display_name=display_name)
            try:
                user = await self._user_repo.create(user)
            except EmailAlreadyExistsError as e:
                # Lost a race against a concurrent registration
                raise UserExistsError from e

            session = await self._sessions.create_session(user.id)
            access_token = self._create_access_token(user)

        logger.info("User registered: %s (%s)", user.id, user.email)
        self._audit.record(AuditEvent.USER_REGISTERED, user.id, {"email": user.email})
        return AuthResult(
            user=UserProfile.from_user(user),
            access_token=access_token,
            refresh_token=session.refresh_token,
            session=session,
        )

    async def login(
        self,
        email: str,
        password: str,
        client_ip: str | None = None,
        user_agent: str | None = None,
    ) -> AuthResult:
        request_meta = {"ip": client_ip, "user_agent": user_agent}

        with self._internal_errors("Login", email=email):
            try:
                email_value = Email(email).value
            except InvalidEmailError:
                email_value = None
            user = await self._user_repo.find_by_email(email_value) if email_value else None

            if user is None:
                self._password_service.verify_dummy(password)
                self._audit.record(
                    AuditEvent.FAILED_LOGIN_ATTEMPT,
                    None,
                    {"email": Email.normalize(email), "reason": "unknown_email", **request_meta},
                )
                raise InvalidCredentialsError

            now = self._clock()
            if self._lockout.is_locked_out(user, now):
                raise AccountLockedError(locked_until=user.locked_until)
            if self._lockout.lock_expired(user, now):
                user = await self._unlock(user, request_meta)

            if not user.is_active:
                raise AccountInactiveError

            if not self._password_service.verify(password, user.password_hash):
                await self._record_failed_login(user, request_meta)
                raise InvalidCredentialsError

            user = await self._complete_login(user, password)
            session = await self._sessions.create_session(
                user.id,
                ip_address=client_ip,
                user_agent=user_agent,
            )
            access_token = self._create_access_token(user)

        logger.info("User logged in: %s", user.id)
        self._audit.record(
            AuditEvent.USER_LOGIN,
            user.id,
            {"email": user.email, "session_id": session.id, **request_meta},
        )
        return AuthResult(
            user=UserProfile.from_user(user),
            access_token=access_token,
            refresh_token=session.refresh_token,
            session=session,
        )

    async def refresh_token(self, refresh_token: str) -> RefreshResult:
        with self._internal_errors("Token refresh"):
            rotation = await self._sessions.rotate(refresh_token)
            user = rotation.user
            session = rotation.session

            if user is None or not user.is_active or user.is_locked:
                await self._sessions.revoke(session.id, actor_id=session.user_id)
                logger.info("Refresh refused for invalid user on session %s", session.id)
                raise UserInvalidError

            access_token = self._create_access_token(user)

        logger.debug("Access token refreshed for user %s", user.id)
        self._audit.record(
            AuditEvent.TOKEN_REFRESHED,
            user.id,
            {"session_id": session.id},
        )
        return RefreshResult(
            access_token=access_token,
            refresh_token=rotation.refresh_token
            if rotation.refresh_token != refresh_token
            else None,
        )

    async def logout(self, refresh_token: str) -> None:
        """Revoke the session behind a refresh token.

        Never raises: a failed logout must not stop the client from clearing
        its own state.
        """
        try:
            session = await self._sessions.find_by_refresh_token(refresh_token)
            if session is None:
                return
            if not await self._sessions.revoke(session.id, actor_id=session.user_id):
                return
            logger.info("User logged out: %s (session %s)", session.user_id, session.id)
            self._audit.record(
                AuditEvent.USER_LOGOUT,
                session.user_id,
                {"session_id": session.id},
            )
        except Exception:
            logger.exception("Logout failed")

    async def change_password(
        self,
        user_id: UUID,
        current_password: str,
        new_password: str,
    ) -> None:
        with self._internal_errors("Password change", user_id=user_id):
            user = await self._user_repo.find_by_id(user_id)
            if user is None:
                raise UserNotFoundError

            if not self._password_service.verify(current_password, user.password_hash):
                raise InvalidPasswordError

            new_hash = self._password_service.hash(new_password)
            if await self._user_repo.update(user_id, password_hash=new_hash) is None:
                raise UserNotFoundError

            revoked = await self._sessions.revoke_all(user_id, reason="password_change")

        logger.info("Password changed for user %s", user_id)
        self._audit.record(
            AuditEvent.PASSWORD_CHANGED,
            user_id,
            {"action": "password_change", "sessions_revoked": revoked},
        )

    def validate_access_token(self, token: str) -> UserContext | None:
        """Return the caller identity for a valid access token, else None."""
        try:
            payload = self._jwt_service.decode_access_token(token)
        except Exception:
            logger.exception("Unexpected error while decoding access token")
            return None
        return UserContext.from_token(payload) if payload else None

    async def get_user_profile(self, user_id: UUID) -> UserProfile | None:
        with self._internal_errors("Profile lookup", user_id=user_id):
            user = await self._user_repo.find_by_id(user_id)
        return UserProfile.from_user(user) if user else None

    async def update_user_profile(
        self,
        user_id: UUID,
        *,
        display_name: str | None = _UNSET,
        email: str | None = _UNSET,
    ) -> UserProfile:
        changes: dict[str, Any] = {}
        if display_name is not _UNSET:
            changes["display_name"] = check_display_name(display_name)
        if email is not _UNSET and email is not None:
            changes["email"] = Email(email).value

        with self._internal_errors("Profile update", user_id=user_id):
            if "email" in changes:
                existing = await self._user_repo.find_by_email(changes["email"])
                if existing is not None and existing.id != user_id:
                    raise EmailTakenError

            if changes:
                try:
                    user = await self._user_repo.update(user_id, **changes)
                except EmailAlreadyExistsError as e:
                    raise EmailTakenError from e
            else:
                user = await self._user_repo.find_by_id(user_id)

            if user is None:
                raise UserNotFoundError

        logger.info("User profile updated: %s (%s)", user_id, sorted(changes))
        self._audit.record(
            AuditEvent.PROFILE_UPDATED,
            user_id,
            {"updates": sorted(changes)},
        )
        return UserProfile.from_user(user)

    async def get_sessions(self, user_id: UUID) -> list[Session]:
        with self._internal_errors("Session listing", user_id=user_id):
            return await self._sessions.list_active(user_id)

    async def get_session_stats(self, user_id: UUID) -> SessionStats:
        with self._internal_errors("Session statistics", user_id=user_id):
            return await self._sessions.get_session_stats(user_id)

    async def revoke_session(self, user_id: UUID, session_id: UUID) -> bool:
        """Revoke one of the user's own sessions.

        Returns False when the session does not exist, is already revoked,
        or belongs to someone else.
        """
        with self._internal_errors("Session revoke", user_id=user_id, session_id=session_id):
            return await self._sessions.revoke(session_id, owner_user_id=user_id)

    async def revoke_all_sessions(self, user_id: UUID) -> int:
        with self._internal_errors("Revoke all sessions", user_id=user_id):
            return await self._sessions.revoke_all(user_id, reason="user_request")

    async def sweep_expired_sessions(self) -> int:
        with self._internal_errors("Session sweep"):
            return await self._sessions.sweep_expired()

    async def _unlock(self, user: User, request_meta: dict[str, Any]) -> User:
        unlocked = await self._user_repo.reset_failed_attempts(user.id)
        if unlocked is None:
            raise InvalidCredentialsError
        logger.info("Lockout expired for user %s; account unlocked", user.id)
        self._audit.record(AuditEvent.ACCOUNT_UNLOCKED, user.id, dict(request_meta))
        return unlocked

    async def _record_failed_login(self, user: User, request_meta: dict[str, Any]) -> None:
        updated = await self._user_repo.increment_failed_attempts(
            user.id,
            lock_threshold=self._lockout.max_failed_attempts,
            locked_until=self._lockout.lock_deadline(self._clock()),
        )
        if updated is None:
            return

        if self._lockout.should_lock(updated.failed_login_attempts):
            self._audit.record(
                AuditEvent.ACCOUNT_LOCKED,
                user.id,
                {
                    "reason": "max_failed_attempts",
                    "failed_attempts": updated.failed_login_attempts,
                    "locked_until": updated.locked_until,
                    **request_meta,
                },
            )
        else:
            self._audit.record(
                AuditEvent.FAILED_LOGIN_ATTEMPT,
                user.id,
                {
                    "failed_attempts": updated.failed_login_attempts,
                    "remaining_attempts": self._lockout.remaining_attempts(updated),
                    **request_meta,
                },
            )

    async def _complete_login(self, user: User, password: str) -> User:
        changes: dict[str, Any] = {"last_login_at": self._clock()}
        if user.failed_login_attempts > 0:
            changes["failed_login_attempts"] = 0
        if self._password_service.needs_rehash(user.password_hash):
            changes["password_hash"] = self._password_service.rehash(password)
        updated = await self._user_repo.update(user.id, **changes)
        return updated or user
