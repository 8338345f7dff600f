"""Officer-side approval flow.

One flow serves every officer action: request a code for the application, let
the officer enter it, then submit the code together with the action payload.
The server decides whether the code is right; the flow only guards against
double submission and reports the outcome.
"""
import enum
import logging
import threading
from typing import Callable
from pmc_portal.client.api import ApiError, PortalApi
from pmc_portal.client.otp_entry import OtpChallengeTimer

logger = logging.getLogger(__name__)


class OfficerAction(str, enum.Enum):
    SCHEDULE = "schedule-appointment"
    APPROVE_JUNIOR = "approve-junior-engineer"
    APPROVE_ASSISTANT = "approve-assistant-engineer"
    APPROVE = "approve"
    SIGN = "apply-digital-signature"
    CERTIFICATE = "generate-certificate"
    REJECT = "reject-by-officer"


class ActionInProgressError(RuntimeError):
    pass


Notifier = Callable[[str, str], None]


class ApprovalFlow:
    def __init__(
        self,
        api: PortalApi,
        officer_id: int | None,
        notify: Notifier,
        refresh: Callable[[], None] | None = None,
        timer: OtpChallengeTimer | None = None,
    ):
        self.api = api
        self.officer_id = officer_id
        self.notify = notify
        self.refresh = refresh
        self.timer = timer or OtpChallengeTimer()
        self.application_id: int | None = None
        self.action: OfficerAction | None = None
        self.reason: str | None = None
        self._in_flight = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    def _acquire(self) -> None:
        if not self._in_flight.acquire(blocking=False):
            raise ActionInProgressError("An action is already being processed")

    def begin(self, action: OfficerAction, application_id: int, reason: str | None = None) -> bool:
        """Request a code for ``action`` on ``application_id``. Returns True when the code was sent."""
        if action == OfficerAction.REJECT and not (reason or "").strip():
            self.notify("error", "Please provide a reason for rejection")
            return False
        if self.application_id == application_id and self.timer.started and not self.timer.can_resend:
            self.notify("error", f"Please wait {self.timer.resend_in()} seconds before requesting a new OTP")
            return False

        self._acquire()
        try:
            self.api.generate_action_otp(application_id, self.officer_id)
        except ApiError as exc:
            self.notify("error", exc.message)
            return False
        finally:
            self._in_flight.release()

        self.application_id = application_id
        self.action = action
        self.reason = reason.strip() if reason else None
        self.timer.start()
        self.notify("success", "OTP sent to your registered email address")
        return True

    def confirm(self, otp: str, **payload) -> dict | None:
        """Submit the entered code with the action; returns the server response or None on failure."""
        if self.action is None or self.application_id is None:
            self.notify("error", "Request an OTP first")
            return None
        if self.timer.locked:
            self.notify("error", "OTP has expired; request a new OTP")
            return None
        otp = (otp or "").strip()
        if not otp:
            self.notify("error", "Please enter the OTP")
            return None

        body = {"applicationId": self.application_id, "otp": otp, "officerId": self.officer_id}
        if self.action == OfficerAction.REJECT:
            body["reason"] = self.reason
        body.update(payload)

        self._acquire()
        try:
            result = self.api.officer_action(self.action.value, body)
        except ApiError as exc:
            logger.info("%s on application %s failed: %s", self.action.value, self.application_id, exc.message)
            self.notify("error", exc.message)
            return None
        finally:
            self._in_flight.release()

        self.notify("success", result.get("message", "Action completed"))
        self.reset()
        if self.refresh:
            self.refresh()
        return result

    def reset(self) -> None:
        self.application_id = None
        self.action = None
        self.reason = None
        self.timer.reset()
