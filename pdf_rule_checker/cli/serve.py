import argparse
import logging

import uvicorn

from pdf_rule_checker.checker.config import get_rule_checker_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the PDF rule checker API")
    parser.add_argument("--host")
    parser.add_argument("--port", type=int)
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--reload", action="store_true")
    return parser


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = get_rule_checker_config()
    host = args.host or config.server.host
    port = config.server.resolve_port(args.port)
    logging.getLogger(__name__).info("Server running on http://%s:%s", host, port)
    uvicorn.run(
        "pdf_rule_checker.api.main:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
