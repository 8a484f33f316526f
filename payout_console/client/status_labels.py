"""Display labels for payout, invoice, payment and attempt statuses.

Statuses the console does not know about are still shown, using the raw
value, instead of failing.
"""

from dataclasses import dataclass
from enum import Enum


class StatusVariant(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"
    DEFAULT = "default"


class KnownStatus(Enum):
    PENDING = ("pending", "Pending", StatusVariant.WARNING, "Awaiting processing")
    FLAGGED = ("flagged", "Flagged", StatusVariant.DANGER, "Requires review")
    APPROVED = ("approved", "Approved", StatusVariant.SUCCESS, "Approved for payment")
    PAID = ("paid", "Paid", StatusVariant.SUCCESS, "Payment completed")
    REJECTED = ("rejected", "Rejected", StatusVariant.DANGER, "Payment rejected")
    HELD = ("held", "Held", StatusVariant.WARNING, "Payment on hold")
    PROCESSED = ("processed", "Processed", StatusVariant.SUCCESS, "Invoice processed")
    COMPLETED = ("completed", "Completed", StatusVariant.SUCCESS, "Payment completed")
    FAILED = ("failed", "Failed", StatusVariant.DANGER, "Processing failed")
    REFUNDED = ("refunded", "Refunded", StatusVariant.DEFAULT, "Payment refunded")
    SUCCESS = ("success", "Success", StatusVariant.SUCCESS, "Attempt succeeded")

    def __init__(self, raw: str, label: str, variant: StatusVariant, description: str):
        self.raw = raw
        self.label = label
        self.variant = variant
        self.description = description

    @property
    def aria_label(self) -> str:
        return f"Status: {self.label} - {self.description.lower()}"


@dataclass(frozen=True)
class UnknownStatus:
    raw: str

    @property
    def label(self) -> str:
        return self.raw.replace("_", " ").capitalize() if self.raw else "Unknown"

    @property
    def variant(self) -> StatusVariant:
        return StatusVariant.DEFAULT

    @property
    def description(self) -> str:
        return "Unknown status"

    @property
    def aria_label(self) -> str:
        return f"Status: {self.label}"


StatusDescriptor = KnownStatus | UnknownStatus

_BY_RAW = {status.raw: status for status in KnownStatus}


def describe_status(raw: str) -> StatusDescriptor:
    return _BY_RAW.get(raw.lower(), UnknownStatus(raw)) if raw else UnknownStatus(raw)
