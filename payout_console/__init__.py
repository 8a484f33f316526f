"""Payout Operations Console.

This service provides APIs for operations staff to:
- Review scheduled creator payouts, filtered by status
- See today's scheduled, held and flagged totals
- Inspect a payout's creator, invoices, payment attempts and fraud signals
- Approve, reject or hold payouts, with an append-only decision audit trail
"""

__version__ = "0.1.0"
