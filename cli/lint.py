from cli._runner import run

PATHS = ["payout_console", "tests", "cli", "scripts"]


def main() -> None:
    """Run linting."""
    import sys

    sys.exit(run(["uv", "run", "ruff", "check", *PATHS]))


def format() -> None:
    """Run code formatting."""
    import sys

    sys.exit(run(["uv", "run", "ruff", "format", *PATHS]))
