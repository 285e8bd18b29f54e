import argparse
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from pdf_rule_checker.api.main import app  # noqa: E402


def write_schema(output_path: Path) -> dict:
    schema = app.openapi()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(schema, indent=2, sort_keys=True))
    return schema


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Dump the rule checker OpenAPI schema")
    parser.add_argument("--output", required=True)
    args = parser.parse_args(argv)

    write_schema(Path(args.output))


if __name__ == "__main__":
    main()
