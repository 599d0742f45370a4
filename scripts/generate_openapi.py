import argparse
import json
from pathlib import Path

from shelf_social_api.main import app


def main() -> None:
    parser = argparse.ArgumentParser(description="Write the OpenAPI schema of the social API.")
    parser.add_argument("--output", type=Path, default=Path("docs") / "openapi.json")
    args = parser.parse_args()

    schema = app.openapi()
    output_path: Path = args.output
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2)

    print(f"OpenAPI schema written to {output_path} ({len(schema.get('paths', {}))} paths)")


if __name__ == "__main__":
    main()
