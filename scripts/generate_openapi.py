"""Generate OpenAPI specification from FastAPI app.

Usage:
    python scripts/generate_openapi.py [docs/openapi.json]

Writes the OpenAPI document for the Payout Operations Console API to the
given path.
"""

import json
import sys
from datetime import UTC, datetime
from pathlib import Path

from payout_console.main import create_app

DEFAULT_OUTPUT = "docs/openapi.json"


def generate_openapi(output_path: str = DEFAULT_OUTPUT) -> dict:
    """Generate and save OpenAPI specification."""
    app = create_app()
    openapi_spec = app.openapi()

    openapi_spec["info"]["x-generated-at"] = datetime.now(UTC).isoformat()

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with open(output, "w") as f:
        json.dump(openapi_spec, f, indent=2)

    print(f"OpenAPI spec written to: {output_path}")
    return openapi_spec


if __name__ == "__main__":
    generate_openapi(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_OUTPUT)
