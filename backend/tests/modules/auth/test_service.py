import logging
import threading
from unittest.mock import patch

import pytest

from modules.auth.exceptions import (
    DeliveryFailureError,
    DuplicateIdentityError,
    EmailNotVerifiedError,
    InvalidCredentialsError,
    LedgerTokenExpiredError,
    LedgerTokenNotFoundError,
    LedgerTokenTypeMismatchError,
    PasswordMismatchError,
    RevokedTokenError,
    UserNotFoundError,
)
from modules.auth.models import (
    ChangePasswordRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenType,
    UpdateProfileRequest,
)
from modules.auth.passwords import PasswordHasher
from modules.auth.service import build_invitation_codes
from shared.exceptions import StorageError, ValidationError
from shared.models import Role

from tests.conftest import ADMIN_CODE, MANAGER_CODE, create_test_token

PASSWORD = "secret123"


@pytest.fixture
def service(container):
    return container.auth


async def register(service, email="alice@example.com", code=None, username=None):
    return await service.register(
        RegisterRequest(email=email, password=PASSWORD, invitation_code=code, username=username)
    )


async def register_verified(service, email_sender, email="alice@example.com", code=None):
    await register(service, email, code)
    return await service.verify_email(email_sender.last_token("verify", email))


class TestInvitationCodes:
    def test_empty_codes_are_skipped(self):
        assert build_invitation_codes("", "") == {}

    def test_maps_codes(self):
        assert build_invitation_codes("a", "m") == {"a": Role.ADMIN, "m": Role.MANAGER}

    @pytest.mark.parametrize(
        "code,role",
        [
            (ADMIN_CODE, Role.ADMIN),
            (MANAGER_CODE, Role.MANAGER),
            ("guess", Role.MEMBER),
            ("", Role.MEMBER),
            (None, Role.MEMBER),
        ],
    )
    def test_resolve_role(self, service, code, role):
        assert service.resolve_role(code) is role


class TestRegister:
    @pytest.mark.asyncio
    async def test_creates_unverified_user_and_sends_link(self, service, email_sender, db):
        user = await register(service)

        assert user.role is Role.MEMBER
        assert user.is_email_verified is False
        assert email_sender.sent[-1].kind == "verify"
        assert email_sender.sent[-1].to == "alice@example.com"
        token_row = db.rows("tokens")[0]
        assert token_row["token"] == email_sender.sent[-1].token
        assert token_row["type"] == "email_verify"

    @pytest.mark.asyncio
    async def test_invitation_code_elevates(self, service):
        user = await register(service, code=ADMIN_CODE)
        assert user.role is Role.ADMIN

    @pytest.mark.asyncio
    async def test_duplicate_email(self, service, email_sender):
        await register(service)
        with pytest.raises(DuplicateIdentityError):
            await register(service)
        assert len(email_sender.sent) == 1

    @pytest.mark.asyncio
    async def test_duplicate_username(self, service):
        await register(service, "alice@example.com", username="alice")
        with pytest.raises(DuplicateIdentityError):
            await register(service, "bob@example.com", username="alice")

    @pytest.mark.asyncio
    async def test_delivery_failure_surfaces(self, service, email_sender):
        email_sender.fail = True
        with pytest.raises(DeliveryFailureError):
            await register(service)


class TestLogin:
    @pytest.mark.asyncio
    async def test_unverified_with_correct_password(self, service):
        await register(service)
        with pytest.raises(EmailNotVerifiedError):
            await service.login("alice@example.com", PASSWORD)

    @pytest.mark.asyncio
    async def test_unverified_with_wrong_password(self, service):
        await register(service)
        with pytest.raises(InvalidCredentialsError):
            await service.login("alice@example.com", "wrong")

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_look_the_same(self, service, email_sender):
        await register_verified(service, email_sender)

        with pytest.raises(InvalidCredentialsError) as unknown:
            await service.login("nobody@example.com", PASSWORD)
        with pytest.raises(InvalidCredentialsError) as wrong:
            await service.login("alice@example.com", "wrong")
        assert unknown.value.message == wrong.value.message

    @pytest.mark.asyncio
    async def test_verified_login_issues_token(self, service, email_sender):
        await register_verified(service, email_sender, code=MANAGER_CODE)

        issued = await service.login("alice@example.com", PASSWORD)
        current = await service.authenticate(issued.token)

        assert current.email == "alice@example.com"
        assert current.role is Role.MANAGER
        assert current.email_verified is True


class TestVerifyEmail:
    @pytest.mark.asyncio
    async def test_single_use(self, service, email_sender):
        await register(service)
        token = email_sender.last_token("verify")
        user = await service.verify_email(token)

        assert user.is_email_verified is True
        with pytest.raises(LedgerTokenNotFoundError):
            await service.verify_email(token)

    @pytest.mark.asyncio
    async def test_reset_token_rejected(self, service, email_sender):
        await register_verified(service, email_sender)
        await service.request_password_reset("alice@example.com")

        with pytest.raises(LedgerTokenTypeMismatchError):
            await service.verify_email(email_sender.last_token("reset"))

    @pytest.mark.asyncio
    async def test_revokes_other_verification_tokens(self, service, email_sender, container, db):
        user = await register(service)
        container.ledger.issue_verification(user.id)

        await service.verify_email(email_sender.last_token("verify"))

        assert [r for r in db.rows("tokens") if r["type"] == "email_verify"] == []


class TestSessions:
    @pytest.mark.asyncio
    async def test_logout_revokes_only_that_token(self, service, email_sender):
        user = await register_verified(service, email_sender)
        issued = await service.login("alice@example.com", PASSWORD)
        other = create_test_token(user.id, user.role.value)

        await service.logout(issued.token)

        with pytest.raises(RevokedTokenError):
            await service.authenticate(issued.token)
        assert (await service.authenticate(other)).id == user.id

    @pytest.mark.asyncio
    async def test_authenticate_logs_masked_token(self, service, email_sender, caplog):
        await register_verified(service, email_sender)
        issued = await service.login("alice@example.com", PASSWORD)
        await service.logout(issued.token)

        with caplog.at_level(logging.WARNING):
            with pytest.raises(RevokedTokenError):
                await service.authenticate(issued.token)

        assert issued.token not in caplog.text
        assert issued.token[:5] + "****" + issued.token[-5:] in caplog.text

    @pytest.mark.asyncio
    async def test_token_for_missing_user(self, service):
        with pytest.raises(UserNotFoundError):
            await service.authenticate(create_test_token("ghost"))

    @pytest.mark.asyncio
    async def test_blacklist_checked_before_signature(self, service, container, make_user):
        owner = make_user("owner@example.com")
        container.ledger.blacklist("not-even-a-jwt", owner.id)

        with pytest.raises(RevokedTokenError):
            await service.authenticate("not-even-a-jwt")


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_unknown_email_is_silent(self, service, email_sender, db):
        await service.request_password_reset("nobody@example.com")
        assert email_sender.sent == []
        assert db.rows("tokens") == []

    @pytest.mark.asyncio
    async def test_full_reset(self, service, email_sender):
        await register_verified(service, email_sender)
        await service.request_password_reset("alice@example.com")
        token = email_sender.last_token("reset")

        await service.check_reset_token(token)
        await service.reset_password(
            ResetPasswordRequest(token=token, new_password="brand-new", confirm_password="brand-new")
        )

        assert await service.login("alice@example.com", "brand-new")
        with pytest.raises(InvalidCredentialsError):
            await service.login("alice@example.com", PASSWORD)
        with pytest.raises(LedgerTokenNotFoundError):
            await service.reset_password(ResetPasswordRequest(token=token, new_password="again1"))

    @pytest.mark.asyncio
    async def test_mismatch_keeps_token(self, service, email_sender):
        await register_verified(service, email_sender)
        await service.request_password_reset("alice@example.com")
        token = email_sender.last_token("reset")

        with pytest.raises(PasswordMismatchError):
            await service.reset_password(
                ResetPasswordRequest(token=token, new_password="brand-new", confirm_password="typo")
            )
        await service.check_reset_token(token)

    @pytest.mark.asyncio
    async def test_verification_token_rejected(self, service, email_sender):
        await register(service)
        with pytest.raises(LedgerTokenTypeMismatchError):
            await service.reset_password(
                ResetPasswordRequest(token=email_sender.last_token("verify"), new_password="brand-new")
            )

    @pytest.mark.asyncio
    async def test_expired_token(self, service, email_sender, db):
        await register_verified(service, email_sender)
        await service.request_password_reset("alice@example.com")
        token = email_sender.last_token("reset")
        db.rows("tokens")[0]["expires_at"] = "2000-01-01T00:00:00+00:00"

        with pytest.raises(LedgerTokenExpiredError):
            await service.reset_password(ResetPasswordRequest(token=token, new_password="brand-new"))

    @pytest.mark.asyncio
    async def test_earlier_links_die_after_reset(self, service, email_sender):
        await register_verified(service, email_sender)
        await service.request_password_reset("alice@example.com")
        first = email_sender.last_token("reset")
        await service.request_password_reset("alice@example.com")
        second = email_sender.last_token("reset")

        await service.reset_password(ResetPasswordRequest(token=second, new_password="brand-new"))

        with pytest.raises(LedgerTokenNotFoundError):
            await service.check_reset_token(first)

    @pytest.mark.asyncio
    async def test_cleanup_failure_is_logged_not_raised(self, service, email_sender, container, caplog):
        await register_verified(service, email_sender)
        await service.request_password_reset("alice@example.com")
        token = email_sender.last_token("reset")

        with patch.object(
            container.ledger,
            "revoke_outstanding",
            side_effect=StorageError("Storage failure on tokens", table="tokens"),
        ):
            with caplog.at_level(logging.ERROR):
                await service.reset_password(ResetPasswordRequest(token=token, new_password="brand-new"))

        assert "Failed to revoke outstanding password_reset tokens" in caplog.text
        assert await service.login("alice@example.com", "brand-new")


class TestProfile:
    @pytest.mark.asyncio
    async def test_empty_update(self, service, email_sender):
        user = await register_verified(service, email_sender)
        with pytest.raises(ValidationError):
            await service.update_profile(user.id, UpdateProfileRequest())

    @pytest.mark.asyncio
    async def test_email_change_requires_reverification(self, service, email_sender):
        user = await register_verified(service, email_sender)

        updated = await service.update_profile(
            user.id, UpdateProfileRequest(email="alice@new.example.com")
        )

        assert updated.is_email_verified is False
        assert email_sender.sent[-1].kind == "verify"
        assert email_sender.sent[-1].to == "alice@new.example.com"
        with pytest.raises(EmailNotVerifiedError):
            await service.login("alice@new.example.com", PASSWORD)

    @pytest.mark.asyncio
    async def test_change_password(self, service, email_sender):
        user = await register_verified(service, email_sender)

        with pytest.raises(InvalidCredentialsError):
            await service.change_password(
                user.id, ChangePasswordRequest(current_password="wrong", new_password="brand-new")
            )

        await service.change_password(
            user.id, ChangePasswordRequest(current_password=PASSWORD, new_password="brand-new")
        )
        assert await service.login("alice@example.com", "brand-new")

    @pytest.mark.asyncio
    async def test_delete_account(self, service, email_sender, container):
        await register_verified(service, email_sender)
        issued = await service.login("alice@example.com", PASSWORD)
        current = await service.authenticate(issued.token)

        await service.delete_account(current)

        assert container.ledger.is_blacklisted(issued.token)
        assert await service.get_user(current.id) is None
        with pytest.raises(InvalidCredentialsError):
            await service.login("alice@example.com", PASSWORD)


class TestBlockingWork:
    """bcrypt and SMTP calls must not run on the event loop thread."""

    @pytest.mark.asyncio
    async def test_emails_are_sent_from_a_worker_thread(self, service, email_sender):
        await register(service)
        await service.request_password_reset("alice@example.com")

        loop_thread = threading.get_ident()
        assert [e.kind for e in email_sender.sent] == ["verify", "reset"]
        assert all(e.thread_id != loop_thread for e in email_sender.sent)

    @pytest.mark.asyncio
    async def test_hashing_runs_in_a_worker_thread(self, service, email_sender):
        user = await register_verified(service, email_sender)
        seen = []
        original_hash, original_verify = PasswordHasher.hash, PasswordHasher.verify

        def spy_hash(self, raw_password):
            seen.append(("hash", threading.get_ident()))
            return original_hash(self, raw_password)

        def spy_verify(self, raw_password, hashed_password):
            seen.append(("verify", threading.get_ident()))
            return original_verify(self, raw_password, hashed_password)

        with patch.object(PasswordHasher, "hash", spy_hash), patch.object(
            PasswordHasher, "verify", spy_verify
        ):
            await service.login("alice@example.com", PASSWORD)
            await service.change_password(
                user.id, ChangePasswordRequest(current_password=PASSWORD, new_password="brand-new")
            )

        assert {kind for kind, _ in seen} == {"hash", "verify"}
        assert all(thread != threading.get_ident() for _, thread in seen)
