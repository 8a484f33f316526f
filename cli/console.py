"""Terminal front end for the funds console.

    payout-console list [--status pending]
    payout-console snapshot
    payout-console show payout-002
    payout-console decide payout-002 rejected --reason "Velocity spike"
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from payout_console.client.api import ApiRequestError
from payout_console.client.console import FILTER_OPTIONS, FundsConsole
from payout_console.client.status_labels import describe_status
from payout_console.core.config import get_settings
from payout_console.core.logging import setup_logging
from payout_console.domain.models.payout import DecisionType


def _print_payouts(console: FundsConsole) -> None:
    for payout in console.payouts or []:
        status = describe_status(payout.status.value)
        print(
            f"{payout.id:<12} {payout.creator_id:<12} {payout.amount:>12,.2f} {payout.currency} "
            f"{status.label:<10} risk={payout.risk_score:<3} {payout.scheduled_for:%Y-%m-%d}"
        )


async def _list(console: FundsConsole, args: argparse.Namespace) -> int:
    if args.status:
        ok = await console.set_filter(args.status)
    else:
        ok = await console.load()
    if not ok:
        print(f"Error: {console.error}", file=sys.stderr)
        return 1
    print(f"Filter: {console.filter}")
    _print_payouts(console)
    return 0


async def _snapshot(console: FundsConsole, args: argparse.Namespace) -> int:
    if not await console.load():
        print(f"Error: {console.error}", file=sys.stderr)
        return 1
    snapshot = console.snapshot
    if snapshot is None:
        print("Error: snapshot unavailable", file=sys.stderr)
        return 1
    print(f"Scheduled today: {snapshot.total_scheduled_today:,.2f} {snapshot.currency}")
    print(f"Held:            {snapshot.held_amount:,.2f} {snapshot.currency}")
    print(f"Flagged:         {snapshot.flagged_amount:,.2f} {snapshot.currency}")
    return 0


async def _show(console: FundsConsole, args: argparse.Namespace) -> int:
    panel = await console.open_panel(args.payout_id)
    if panel.details is None:
        print(f"Error: {panel.load_error}", file=sys.stderr)
        return 1
    details = panel.details
    print(f"{details.id}  {describe_status(details.status.value).aria_label}")
    print(f"Creator: {details.creator.display_name} <{details.creator.email}>")
    print(f"Amount:  {details.amount:,.2f} {details.currency} via {details.method.value}")
    for invoice in details.invoices:
        print(f"Invoice {invoice.invoice_number}: {invoice.amount:,.2f} ({invoice.status.value})")
    if details.latest_payment_attempt is not None:
        attempt = details.latest_payment_attempt
        print(f"Latest attempt: {attempt.status.value} {attempt.gateway_response}")
    for note in details.fraud_notes:
        print(f"Fraud: {note}")
    if not panel.can_take_action:
        print("No decision can be taken on this payout.")
    return 0


async def _decide(console: FundsConsole, args: argparse.Namespace) -> int:
    panel = await console.open_panel(args.payout_id)
    if not panel.can_take_action:
        print(f"Payout {args.payout_id} is {panel.payout.status.value}", file=sys.stderr)
        return 1
    panel.select_decision(args.decision)
    panel.set_reason(args.reason or "")
    result = await panel.submit()
    if result is None:
        print(f"Error: {panel.error}", file=sys.stderr)
        return 1
    print(f"Recorded {result.id}: {result.payout_id} {result.decision.value}")
    return 0


COMMANDS = {"list": _list, "snapshot": _snapshot, "show": _show, "decide": _decide}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Payout Operations Console")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List scheduled payouts")
    list_cmd.add_argument("--status", choices=FILTER_OPTIONS, default=None)

    sub.add_parser("snapshot", help="Show today's funds snapshot")

    show_cmd = sub.add_parser("show", help="Show payout details")
    show_cmd.add_argument("payout_id")

    decide_cmd = sub.add_parser("decide", help="Record a decision")
    decide_cmd.add_argument("payout_id")
    decide_cmd.add_argument("decision", choices=[d.value for d in DecisionType])
    decide_cmd.add_argument("--reason", default=None)
    return parser


async def _run(args: argparse.Namespace) -> int:
    console = FundsConsole.from_settings(get_settings())
    try:
        return await COMMANDS[args.command](console, args)
    except ApiRequestError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    finally:
        await console.aclose()


def main() -> None:
    """Run the terminal console against a running API."""
    args = build_parser().parse_args()
    setup_logging(get_settings())
    sys.exit(asyncio.run(_run(args)))
