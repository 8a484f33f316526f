"""Payout domain models.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PayoutStatus(str, Enum):
    PENDING = "pending"
    FLAGGED = "flagged"
    APPROVED = "approved"
    PAID = "paid"
    REJECTED = "rejected"
    HELD = "held"


class DecisionType(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"
    HELD = "held"


class PayoutMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    PAYPAL = "paypal"
    STRIPE = "stripe"


class CreatorStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    PENDING_VERIFICATION = "pending_verification"


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentAttemptStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class FraudSignalType(str, Enum):
    VELOCITY = "velocity"
    GEO_MISMATCH = "geo_mismatch"
    PATTERN_MATCH = "pattern_match"
    AMOUNT_ANOMALY = "amount_anomaly"
    DEVICE_FINGERPRINT = "device_fingerprint"


class FraudSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Statuses a decision cannot move a payout out of
TERMINAL_PAYOUT_STATUSES = frozenset({PayoutStatus.PAID})


class DomainModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Creator(DomainModel):
    id: str
    email: str
    display_name: str
    status: CreatorStatus
    created_at: datetime
    updated_at: datetime


class Payout(DomainModel):
    id: str
    creator_id: str
    amount: float
    currency: str = "USD"
    method: PayoutMethod
    status: PayoutStatus
    scheduled_for: datetime
    risk_score: int = Field(..., ge=0, le=100, description="0-100, higher is riskier")
    created_at: datetime
    updated_at: datetime


class PayoutInvoice(DomainModel):
    id: str
    payout_id: str
    invoice_number: str
    amount: float
    status: InvoiceStatus
    created_at: datetime


class Payment(DomainModel):
    id: str
    creator_id: str
    subscriber_id: str
    amount: float
    currency: str = "USD"
    status: PaymentStatus
    created_at: datetime
    updated_at: datetime


class PaymentAttempt(DomainModel):
    id: str
    payment_id: str
    status: PaymentAttemptStatus
    gateway_response: str
    error_code: str | None = None
    created_at: datetime


class FraudSignal(DomainModel):
    id: str
    payout_id: str
    type: FraudSignalType
    severity: FraudSeverity
    description: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    def to_note(self) -> str:
        """Render the signal as an analyst-facing fraud note."""
        return f"[{self.severity.value.upper()}] {self.type.value}: {self.description}"


class PayoutDecision(DomainModel):
    """Audit record of an operator decision. Never mutated once appended."""

    id: str
    payout_id: str
    decision: DecisionType
    reason: str | None = None
    decided_by: str
    created_at: datetime


class PayoutWithDetails(Payout):
    creator: Creator
    invoices: list[PayoutInvoice] = Field(default_factory=list)
    latest_payment_attempt: PaymentAttempt | None = None
    fraud_signals: list[FraudSignal] = Field(default_factory=list)
    fraud_notes: list[str] = Field(default_factory=list)


class FundsSnapshot(DomainModel):
    total_scheduled_today: float
    held_amount: float
    flagged_amount: float
    currency: str = "USD"
