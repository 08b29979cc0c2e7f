"""Write the API's OpenAPI schema to openapi.json."""

import argparse
import json
from pathlib import Path

from intellichat.main import app


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--output", type=Path, default=Path("openapi.json"))
    args = parser.parse_args()

    schema = app.openapi()
    args.output.write_text(json.dumps(schema, indent=2, ensure_ascii=False) + "\n")
    print(f"Generated {args.output} ({len(schema['paths'])} endpoints)")


if __name__ == "__main__":
    main()
