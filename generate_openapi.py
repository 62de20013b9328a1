#!/usr/bin/env python3
"""
Generate OpenAPI schema from the Narrator FastAPI application.

Usage:
    python generate_openapi.py

Writes openapi.json next to this script for client code generation.
"""

import json
import sys
from pathlib import Path

# Add src directory to path to import the app
sys.path.insert(0, str(Path(__file__).parent / "src"))

from narrator.api.main import app  # noqa: E402


def generate_openapi_schema():
    """Generate and save OpenAPI schema to openapi.json."""
    openapi_schema = app.openapi()
    output_path = Path(__file__).parent / "openapi.json"

    with open(output_path, "w") as f:
        json.dump(openapi_schema, f, indent=2)

    print(f"OpenAPI schema exported to {output_path}")
    print(f"   Total endpoints: {len(openapi_schema.get('paths', {}))}")
    print(f"   API version: {openapi_schema.get('info', {}).get('version', 'unknown')}")


if __name__ == "__main__":
    generate_openapi_schema()
