from __future__ import annotations

import logging
import re
from typing import Any, Protocol

import httpx

from tableside.application.dto.backend import (
    EmployeeEnvelope,
    Envelope,
    RawEmployee,
    TokenEnvelope,
)
from tableside.application.errors import (
    AuthenticationRequiredError,
    http_error_message,
    require_token,
)
from tableside.application.mappers.employee_mapper import to_employee
from tableside.application.ports.backend import AuthBackend
from tableside.application.ports.token_store import TokenStore
from tableside.domain.employee.entities import Employee

logger = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class SessionScoped(Protocol):
    def reset(self) -> None: ...


class InvalidEmailError(Exception):
    pass


def validate_email(email: str) -> str:
    cleaned = email.strip()
    if not _EMAIL_PATTERN.match(cleaned):
        raise InvalidEmailError("Please enter a valid business email address")
    return cleaned


class StaffSession:
    """Email-OTP login and the lifecycle of everything scoped to a signed-in employee.

    Only the bearer token is persisted. ``restore`` re-resolves the employee from
    it on start-up, and ``logout`` clears it and resets every registered store.
    """

    def __init__(
        self,
        backend: AuthBackend,
        token_store: TokenStore,
        scoped: list[SessionScoped] | None = None,
    ) -> None:
        self._backend = backend
        self._token_store = token_store
        self._scoped: list[SessionScoped] = list(scoped or [])
        self.employee: Employee | None = None
        self.message: str | None = None
        self.error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token_store.get_token())

    def register(self, store: SessionScoped) -> None:
        self._scoped.append(store)

    def send_otp(self, email: str) -> bool:
        try:
            cleaned = validate_email(email)
            envelope = Envelope.model_validate(self._backend.send_otp(cleaned))
        except InvalidEmailError as exc:
            return self._fail(str(exc))
        except httpx.HTTPError as exc:
            return self._fail(http_error_message(exc, "Network error while sending code"))
        except ValueError:
            return self._fail("Unexpected response from server")

        if not envelope.success:
            return self._fail(
                envelope.message
                or "You are not registered as an employee. Please contact your employer."
            )
        return self._succeed(envelope.message or "Verification code sent. Check your email.")

    def verify_otp(self, email: str, otp: str) -> bool:
        try:
            envelope = TokenEnvelope.model_validate(
                self._backend.verify_otp(email.strip(), otp.strip())
            )
        except httpx.HTTPError as exc:
            return self._fail(http_error_message(exc, "Network error while verifying code"))
        except ValueError:
            return self._fail("Unexpected response from server")

        if not envelope.success:
            return self._fail(envelope.message or "Invalid code or user not registered")
        if not envelope.token:
            return self._fail(envelope.message or "Authentication failed")

        self._token_store.set_token(envelope.token)
        logger.info("staff_signed_in")
        return self._succeed(envelope.message or "Successfully signed in")

    def restore(self) -> Employee | None:
        token = self._token_store.get_token()
        if not token:
            self.employee = None
            return None

        try:
            envelope = EmployeeEnvelope.model_validate(self._backend.verify_token(token))
        except httpx.HTTPError as exc:
            self._fail(http_error_message(exc, "Network error while verifying session"))
            return None
        except ValueError:
            self._fail("Unexpected response from server")
            return None

        if not envelope.success or not envelope.data or not envelope.data.get("email"):
            logger.info("stored_token_rejected")
            self._token_store.clear_token()
            self.employee = None
            self._fail(envelope.message or "Session expired. Please sign in again.")
            return None

        if self.load_profile(str(envelope.data["email"])):
            return self.employee
        self.employee = self._employee_from(envelope.data)
        return self.employee

    def load_profile(self, email: str) -> bool:
        try:
            token = require_token(self._token_store)
            envelope = EmployeeEnvelope.model_validate(
                self._backend.get_employee_profile(email, token)
            )
        except AuthenticationRequiredError as exc:
            return self._fail(str(exc))
        except httpx.HTTPError as exc:
            return self._fail(http_error_message(exc, "Network error while loading profile"))
        except ValueError:
            return self._fail("Unexpected response from server")

        if not envelope.success or not envelope.data:
            return self._fail(envelope.message or "Failed to load profile")

        employee = self._employee_from(envelope.data)
        if employee is None:
            return self._fail("Failed to load profile")
        self.employee = employee
        self.error = None
        return True

    def update_profile(self, changes: dict[str, Any]) -> bool:
        try:
            token = require_token(self._token_store)
            envelope = Envelope.model_validate(
                self._backend.update_employee_profile(changes, token)
            )
        except AuthenticationRequiredError as exc:
            return self._fail(str(exc))
        except httpx.HTTPError as exc:
            return self._fail(http_error_message(exc, "Network error while updating profile"))
        except ValueError:
            return self._fail("Unexpected response from server")

        if not envelope.success:
            return self._fail(envelope.message or "Failed to update profile")

        if self.employee is not None:
            self.load_profile(self.employee.email)
        return self._succeed(envelope.message or "Profile updated")

    def logout(self) -> None:
        self._token_store.clear_token()
        for store in self._scoped:
            store.reset()
        self.employee = None
        self.message = None
        self.error = None
        logger.info("staff_signed_out")

    def _employee_from(self, data: dict[str, Any]) -> Employee | None:
        try:
            return to_employee(RawEmployee.model_validate(data))
        except ValueError:
            logger.warning("employee_normalization_failed", exc_info=True)
            return None

    def _succeed(self, message: str) -> bool:
        self.message = message
        self.error = None
        return True

    def _fail(self, message: str) -> bool:
        self.message = None
        self.error = message
        return False
