import time
from typing import Callable

OTP_LENGTH = 6
OTP_VALIDITY_SECONDS = 5 * 60
RESEND_COOLDOWN_SECONDS = 30


class OtpEntry:
    """State of the six single-digit OTP input cells."""

    def __init__(self, length: int = OTP_LENGTH):
        self.length = length
        self.cells = [""] * length
        self.focus = 0

    @property
    def value(self) -> str:
        return "".join(self.cells)

    @property
    def complete(self) -> bool:
        return all(self.cells)

    def enter(self, index: int, text: str) -> None:
        """Handle a change in cell ``index``; only the last typed digit is kept."""
        if not 0 <= index < self.length or not text or not text.isdigit():
            return
        self.cells[index] = text[-1]
        if index < self.length - 1:
            self.focus = index + 1

    def backspace(self, index: int) -> None:
        if not 0 <= index < self.length:
            return
        if self.cells[index]:
            self.cells[index] = ""
        elif index > 0:
            self.focus = index - 1

    def paste(self, text: str) -> None:
        digits = text.strip()[: self.length]
        if not digits or not digits.isdigit():
            return
        for i, digit in enumerate(digits):
            self.cells[i] = digit
        self.focus = len(digits) - 1

    def clear(self) -> None:
        self.cells = [""] * self.length
        self.focus = 0


class OtpChallengeTimer:
    """Validity window and resend cooldown of the OTP most recently requested."""

    def __init__(
        self,
        validity: float = OTP_VALIDITY_SECONDS,
        cooldown: float = RESEND_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.validity = validity
        self.cooldown = cooldown
        self._clock = clock
        self._issued_at: float | None = None

    def start(self) -> None:
        self._issued_at = self._clock()

    def reset(self) -> None:
        self._issued_at = None

    @property
    def started(self) -> bool:
        return self._issued_at is not None

    def _elapsed(self) -> float:
        return self._clock() - self._issued_at

    def remaining(self) -> float:
        if not self.started:
            return 0
        return max(0.0, self.validity - self._elapsed())

    @property
    def expired(self) -> bool:
        return self.started and self.remaining() == 0

    @property
    def locked(self) -> bool:
        # No code to submit until one is requested, and none after expiry.
        return not self.started or self.expired

    def resend_in(self) -> int:
        if not self.started:
            return 0
        return max(0, int(self.cooldown - self._elapsed() + 0.999))

    @property
    def can_resend(self) -> bool:
        return self.resend_in() == 0

    def remaining_label(self) -> str:
        seconds = int(self.remaining() + 0.999)
        return f"{seconds // 60:02d}:{seconds % 60:02d}"
