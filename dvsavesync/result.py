"""Result objects returned by sync operations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """Why an operation did not succeed."""

    TRANSFER = "transfer"
    """A filesystem error occurred while copying"""

    POLICY_ABORT = "policy_abort"
    """A safety guard or the configuration refused the operation"""


@dataclass
class OperationResult:
    """Ordered messages plus a success flag.

    The result starts out successful. The first failure message flips
    ``is_success`` to False and it stays False for the rest of the
    operation.
    """

    messages: list[str] = field(default_factory=list)
    """Human-readable messages in the order they were added"""

    is_success: bool = True
    """False once any failure message was added"""

    failure_kind: Optional[FailureKind] = None
    """Kind of the first failure, None while successful"""

    def add_message(self, message: Optional[str]) -> None:
        """Append a message without touching the success flag."""
        if not message:
            return
        self.messages.append(message)

    def add_failure_message(
        self, message: Optional[str], kind: FailureKind = FailureKind.TRANSFER
    ) -> None:
        """Append a message and mark the result as failed."""
        self.add_message(message)
        if self.is_success:
            self.failure_kind = kind
        self.is_success = False

    @property
    def aborted(self) -> bool:
        """True if the operation was refused rather than broken."""
        return self.failure_kind == FailureKind.POLICY_ABORT

    def __str__(self) -> str:
        return "\n".join(self.messages)
