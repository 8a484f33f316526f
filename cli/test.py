from cli._runner import run


def main() -> None:
    """Run tests."""
    import sys

    sys.exit(run(["uv", "run", "pytest", *sys.argv[1:]]))


def test_v() -> None:
    """Run tests with verbose output."""
    import sys

    sys.exit(run(["uv", "run", "pytest", "-v"]))


def test_unit() -> None:
    """Run unit tests only."""
    import sys

    sys.exit(run(["uv", "run", "pytest", "-m", "unit"]))


def test_integration() -> None:
    """Run API and client integration tests only."""
    import sys

    sys.exit(run(["uv", "run", "pytest", "-m", "integration"]))
