"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Settings are read here once and passed down as constructor arguments,
so no component reaches for global configuration on its own.
"""

from datetime import timedelta
from typing import TYPE_CHECKING, Optional

from fastapi import Depends

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from supabase import Client

    from modules.access.interfaces import IAccessService
    from modules.auth.interfaces import IAuthService, IEmailSender
    from modules.auth.ledger import TokenLedger
    from modules.notifications.interfaces import INotificationService
    from modules.workspace.interfaces import IWorkspaceService


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container. Tests
    build a container around a fake database client and email sender.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        db: "Client | None" = None,
        email_sender: "IEmailSender | None" = None,
    ) -> None:
        self._settings = settings
        self._db = db
        self._email_sender = email_sender
        self._ledger: "TokenLedger | None" = None
        self._auth_service: "IAuthService | None" = None
        self._access_service: "IAccessService | None" = None
        self._workspace_service: "IWorkspaceService | None" = None
        self._notification_service: "INotificationService | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def db(self) -> "Client":
        """Get the Supabase client."""
        if self._db is None:
            from shared.database import create_supabase_client
            self._db = create_supabase_client(self.settings)
        return self._db

    @property
    def email_sender(self) -> "IEmailSender":
        """Get the email delivery collaborator."""
        if self._email_sender is None:
            from modules.auth.email import SmtpEmailSender
            s = self.settings
            self._email_sender = SmtpEmailSender(
                smtp_host=s.smtp_host,
                smtp_port=s.smtp_port,
                smtp_user=s.smtp_user,
                smtp_password=s.smtp_password,
                smtp_use_tls=s.smtp_use_tls,
                from_email=s.email_from,
                from_name=s.email_from_name,
                public_base_url=s.public_base_url,
                frontend_url=s.frontend_url,
            )
        return self._email_sender

    @property
    def ledger(self) -> "TokenLedger":
        """Get the single-use token ledger."""
        if self._ledger is None:
            from modules.auth.ledger import TokenLedger
            s = self.settings
            self._ledger = TokenLedger(
                self.db,
                verification_ttl=timedelta(hours=s.email_verification_ttl_hours),
                reset_ttl=timedelta(hours=s.password_reset_ttl_hours),
                blacklist_ttl=timedelta(hours=s.blacklist_ttl_hours),
                token_bytes=s.ledger_token_bytes,
            )
        return self._ledger

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.credentials import CredentialStore
            from modules.auth.passwords import PasswordHasher
            from modules.auth.repository import UserRepository
            from modules.auth.service import AuthService, build_invitation_codes
            from modules.auth.tokens import SessionTokenIssuer

            s = self.settings
            self._auth_service = AuthService(
                credentials=CredentialStore(
                    UserRepository(self.db),
                    PasswordHasher(rounds=s.bcrypt_rounds),
                ),
                issuer=SessionTokenIssuer(
                    secret=s.jwt_secret,
                    issuer=s.jwt_issuer,
                    ttl=timedelta(hours=s.access_token_ttl_hours),
                    algorithm=s.jwt_algorithm,
                ),
                ledger=self.ledger,
                email_sender=self.email_sender,
                invitation_codes=build_invitation_codes(
                    s.admin_invitation_code, s.manager_invitation_code
                ),
            )
        return self._auth_service

    @property
    def access(self) -> "IAccessService":
        """Get the access control service instance."""
        if self._access_service is None:
            from modules.access.repository import AccessRepository
            from modules.access.service import AccessControlService
            self._access_service = AccessControlService(AccessRepository(self.db))
        return self._access_service

    @property
    def workspace(self) -> "IWorkspaceService":
        """Get the workspace service instance."""
        if self._workspace_service is None:
            from modules.workspace.repository import WorkspaceRepository
            from modules.workspace.service import WorkspaceService
            self._workspace_service = WorkspaceService(
                repository=WorkspaceRepository(self.db),
                access=self.access,
            )
        return self._workspace_service

    @property
    def notifications(self) -> "INotificationService":
        """Get the notification service instance."""
        if self._notification_service is None:
            from modules.notifications.repository import NotificationRepository
            from modules.notifications.service import NotificationService
            self._notification_service = NotificationService(
                repository=NotificationRepository(self.db),
                access=self.access,
            )
        return self._notification_service

    def reset(self) -> None:
        """
        Reset all cached services.

        Settings, the database client and the email sender passed to the
        constructor are kept.
        """
        self._ledger = None
        self._auth_service = None
        self._access_service = None
        self._workspace_service = None
        self._notification_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service(container: ServiceContainer = Depends(get_container)) -> "IAuthService":
    """FastAPI dependency for auth service."""
    return container.auth


def get_workspace_service(
    container: ServiceContainer = Depends(get_container),
) -> "IWorkspaceService":
    """FastAPI dependency for workspace service."""
    return container.workspace


def get_notification_service(
    container: ServiceContainer = Depends(get_container),
) -> "INotificationService":
    """FastAPI dependency for notification service."""
    return container.notifications
