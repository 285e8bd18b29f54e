import argparse
import json
from pathlib import Path

from openapi_spec_validator import validate

REQUIRED_PATHS = {"/health": "get", "/api/check-pdf": "post"}


def check_schema(spec: dict) -> None:
    validate(spec)
    paths = spec.get("paths", {})
    missing = [
        f"{method.upper()} {path}"
        for path, method in REQUIRED_PATHS.items()
        if method not in paths.get(path, {})
    ]
    if missing:
        raise SystemExit(f"OpenAPI schema is missing operations {missing}")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Validate a dumped OpenAPI schema")
    parser.add_argument("--spec", required=True)
    args = parser.parse_args(argv)

    check_schema(json.loads(Path(args.spec).read_text()))


if __name__ == "__main__":
    main()
