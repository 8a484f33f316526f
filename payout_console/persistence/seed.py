"""Fixture data loaded into the record store at startup.

Dates are laid out relative to the local day the store is built on, so the
funds snapshot always has payouts scheduled "today".
"""

from datetime import UTC, datetime, timedelta

from payout_console.domain.models.payout import (
    Creator,
    CreatorStatus,
    FraudSeverity,
    FraudSignal,
    FraudSignalType,
    InvoiceStatus,
    Payment,
    PaymentAttempt,
    PaymentAttemptStatus,
    PaymentStatus,
    Payout,
    PayoutInvoice,
    PayoutMethod,
    PayoutStatus,
)
from payout_console.persistence.memory_store import InMemoryRecordStore

# (id, creator, amount, method, status, day offset, hour, risk score)
_PAYOUT_ROWS = [
    ("payout-001", "creator-001", 1250.00, PayoutMethod.BANK_TRANSFER, PayoutStatus.PENDING, 0, 9, 12),
    ("payout-002", "creator-002", 8400.50, PayoutMethod.PAYPAL, PayoutStatus.FLAGGED, 0, 10, 87),
    ("payout-003", "creator-003", 3200.00, PayoutMethod.STRIPE, PayoutStatus.PAID, -1, 14, 8),
    ("payout-004", "creator-004", 5600.75, PayoutMethod.BANK_TRANSFER, PayoutStatus.HELD, 0, 11, 64),
    ("payout-005", "creator-001", 980.25, PayoutMethod.STRIPE, PayoutStatus.APPROVED, 1, 9, 15),
    ("payout-006", "creator-005", 2150.00, PayoutMethod.PAYPAL, PayoutStatus.PENDING, 2, 13, 33),
    ("payout-007", "creator-002", 12500.00, PayoutMethod.BANK_TRANSFER, PayoutStatus.FLAGGED, 0, 15, 92),
    ("payout-008", "creator-004", 430.10, PayoutMethod.PAYPAL, PayoutStatus.REJECTED, -2, 16, 78),
    ("payout-009", "creator-003", 1875.40, PayoutMethod.STRIPE, PayoutStatus.PENDING, 0, 16, 21),
    ("payout-010", "creator-005", 6720.00, PayoutMethod.BANK_TRANSFER, PayoutStatus.HELD, 3, 10, 58),
]


def _start_of_local_day(now: datetime) -> datetime:
    local = now.astimezone()
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def build_seed_store(now: datetime | None = None) -> InMemoryRecordStore:
    """Build a store populated with the standard fixture data."""
    now = now or datetime.now().astimezone()
    day = _start_of_local_day(now)

    def at(day_offset: int, hour: int, minute: int = 0) -> datetime:
        return (day + timedelta(days=day_offset, hours=hour, minutes=minute)).astimezone(UTC)

    created = at(-30, 9)

    creators = [
        Creator(
            id="creator-001",
            email="maya.chen@example.com",
            display_name="Maya Chen",
            status=CreatorStatus.ACTIVE,
            created_at=created,
            updated_at=created,
        ),
        Creator(
            id="creator-002",
            email="jordan.blake@example.com",
            display_name="Jordan Blake",
            status=CreatorStatus.PENDING_VERIFICATION,
            created_at=created,
            updated_at=at(-3, 12),
        ),
        Creator(
            id="creator-003",
            email="priya.raman@example.com",
            display_name="Priya Raman",
            status=CreatorStatus.ACTIVE,
            created_at=created,
            updated_at=created,
        ),
        Creator(
            id="creator-004",
            email="lucas.ferreira@example.com",
            display_name="Lucas Ferreira",
            status=CreatorStatus.SUSPENDED,
            created_at=created,
            updated_at=at(-2, 17),
        ),
        Creator(
            id="creator-005",
            email="amara.okafor@example.com",
            display_name="Amara Okafor",
            status=CreatorStatus.ACTIVE,
            created_at=created,
            updated_at=created,
        ),
    ]

    payouts = [
        Payout(
            id=payout_id,
            creator_id=creator_id,
            amount=amount,
            currency="USD",
            method=method,
            status=status,
            scheduled_for=at(offset, hour),
            risk_score=risk,
            created_at=at(-7, 8),
            updated_at=at(-1, 8),
        )
        for payout_id, creator_id, amount, method, status, offset, hour, risk in _PAYOUT_ROWS
    ]

    invoices = [
        PayoutInvoice(
            id="invoice-001",
            payout_id="payout-001",
            invoice_number="INV-2024-0001",
            amount=750.00,
            status=InvoiceStatus.PROCESSED,
            created_at=at(-6, 10),
        ),
        PayoutInvoice(
            id="invoice-002",
            payout_id="payout-001",
            invoice_number="INV-2024-0002",
            amount=500.00,
            status=InvoiceStatus.PENDING,
            created_at=at(-5, 10),
        ),
        PayoutInvoice(
            id="invoice-003",
            payout_id="payout-002",
            invoice_number="INV-2024-0003",
            amount=8400.50,
            status=InvoiceStatus.PENDING,
            created_at=at(-4, 11),
        ),
        PayoutInvoice(
            id="invoice-004",
            payout_id="payout-003",
            invoice_number="INV-2024-0004",
            amount=3200.00,
            status=InvoiceStatus.PROCESSED,
            created_at=at(-8, 9),
        ),
        PayoutInvoice(
            id="invoice-005",
            payout_id="payout-004",
            invoice_number="INV-2024-0005",
            amount=5600.75,
            status=InvoiceStatus.FAILED,
            created_at=at(-3, 15),
        ),
        PayoutInvoice(
            id="invoice-006",
            payout_id="payout-007",
            invoice_number="INV-2024-0006",
            amount=12500.00,
            status=InvoiceStatus.PENDING,
            created_at=at(-1, 18),
        ),
    ]

    payments = [
        Payment(
            id="payment-001",
            creator_id="creator-001",
            subscriber_id="subscriber-101",
            amount=19.99,
            status=PaymentStatus.COMPLETED,
            created_at=at(-10, 8),
            updated_at=at(-10, 8),
        ),
        Payment(
            id="payment-002",
            creator_id="creator-001",
            subscriber_id="subscriber-102",
            amount=49.00,
            status=PaymentStatus.FAILED,
            created_at=at(-2, 8),
            updated_at=at(-2, 9),
        ),
        Payment(
            id="payment-003",
            creator_id="creator-002",
            subscriber_id="subscriber-201",
            amount=250.00,
            status=PaymentStatus.REFUNDED,
            created_at=at(-5, 20),
            updated_at=at(-4, 7),
        ),
        Payment(
            id="payment-004",
            creator_id="creator-003",
            subscriber_id="subscriber-301",
            amount=9.99,
            status=PaymentStatus.COMPLETED,
            created_at=at(-9, 12),
            updated_at=at(-9, 12),
        ),
        Payment(
            id="payment-005",
            creator_id="creator-004",
            subscriber_id="subscriber-401",
            amount=120.00,
            status=PaymentStatus.PENDING,
            created_at=at(-1, 22),
            updated_at=at(-1, 22),
        ),
    ]

    payment_attempts = [
        PaymentAttempt(
            id="attempt-001",
            payment_id="payment-001",
            status=PaymentAttemptStatus.SUCCESS,
            gateway_response="Approved",
            created_at=at(-10, 8, 1),
        ),
        PaymentAttempt(
            id="attempt-002",
            payment_id="payment-002",
            status=PaymentAttemptStatus.FAILED,
            gateway_response="Card declined",
            error_code="card_declined",
            created_at=at(-2, 8, 1),
        ),
        PaymentAttempt(
            id="attempt-003",
            payment_id="payment-002",
            status=PaymentAttemptStatus.FAILED,
            gateway_response="Insufficient funds",
            error_code="insufficient_funds",
            created_at=at(-2, 9, 30),
        ),
        PaymentAttempt(
            id="attempt-004",
            payment_id="payment-003",
            status=PaymentAttemptStatus.SUCCESS,
            gateway_response="Approved",
            created_at=at(-5, 20, 2),
        ),
        PaymentAttempt(
            id="attempt-005",
            payment_id="payment-004",
            status=PaymentAttemptStatus.SUCCESS,
            gateway_response="Approved",
            created_at=at(-9, 12, 1),
        ),
        PaymentAttempt(
            id="attempt-006",
            payment_id="payment-005",
            status=PaymentAttemptStatus.PENDING,
            gateway_response="Awaiting 3DS confirmation",
            created_at=at(-1, 22, 5),
        ),
    ]

    fraud_signals = [
        FraudSignal(
            id="signal-001",
            payout_id="payout-002",
            type=FraudSignalType.VELOCITY,
            severity=FraudSeverity.HIGH,
            description="14 payout requests in the last 24 hours",
            metadata={"requests_24h": 14, "baseline": 2},
            created_at=at(-1, 6),
        ),
        FraudSignal(
            id="signal-002",
            payout_id="payout-002",
            type=FraudSignalType.GEO_MISMATCH,
            severity=FraudSeverity.MEDIUM,
            description="Login country differs from bank account country",
            metadata={"login_country": "RO", "bank_country": "US"},
            created_at=at(-1, 6, 5),
        ),
        FraudSignal(
            id="signal-003",
            payout_id="payout-004",
            type=FraudSignalType.DEVICE_FINGERPRINT,
            severity=FraudSeverity.LOW,
            description="New device used to update payout details",
            metadata={"device_age_days": 0},
            created_at=at(-3, 14),
        ),
        FraudSignal(
            id="signal-004",
            payout_id="payout-007",
            type=FraudSignalType.AMOUNT_ANOMALY,
            severity=FraudSeverity.CRITICAL,
            description="Payout amount is 9x the creator's 90-day average",
            metadata={"ratio": 9.1, "avg_90d": 1370.0},
            created_at=at(0, 1),
        ),
        FraudSignal(
            id="signal-005",
            payout_id="payout-008",
            type=FraudSignalType.PATTERN_MATCH,
            severity=FraudSeverity.HIGH,
            description="Subscriber pattern matches known card-testing ring",
            metadata={"ring_id": "ring-17"},
            created_at=at(-3, 9),
        ),
    ]

    return InMemoryRecordStore(
        creators=creators,
        payouts=payouts,
        invoices=invoices,
        payments=payments,
        payment_attempts=payment_attempts,
        fraud_signals=fraud_signals,
    )
