def main() -> None:
    """Run development server."""
    from payout_console.main import run

    run()
