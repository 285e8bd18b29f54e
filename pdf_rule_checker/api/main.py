import json
import logging
from typing import Any, List, Optional

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pdf_rule_checker.checker.config import RuleCheckerConfig, get_rule_checker_config
from pdf_rule_checker.checker.errors import (
    ExtractionError,
    InternalError,
    RuleCheckError,
    UploadTooLargeError,
    ValidationError,
)
from pdf_rule_checker.checker.llm_client import LLMClient
from pdf_rule_checker.checker.rule_checker import build_llm_client, evaluate_rules
from pdf_rule_checker.checker.schemas import (
    CheckResponse,
    ErrorResponse,
    InternalErrorResponse,
)
from pdf_rule_checker.extraction.pdf_text import (
    HEADER_SEARCH_BYTES,
    extract_text,
    looks_like_pdf,
)
from pdf_rule_checker.storage.uploads import UploadStore

logger = logging.getLogger(__name__)

# Room for multipart boundaries and the rules field on top of the file itself.
MULTIPART_ALLOWANCE_BYTES = 64 * 1024

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    500: {"model": InternalErrorResponse},
}

FIELD_ERRORS = {
    "pdf": "No PDF file uploaded",
    "rules": "At least one rule is required",
}


def parse_rules(raw_rules: Optional[str]) -> List[Optional[str]]:
    if raw_rules is None:
        raise ValidationError("At least one rule is required")
    try:
        rules: Any = json.loads(raw_rules)
    except json.JSONDecodeError as exc:
        raise ValidationError("Invalid rules format") from exc
    if not isinstance(rules, list) or not rules:
        raise ValidationError("At least one rule is required")
    if any(rule is not None and not isinstance(rule, str) for rule in rules):
        raise ValidationError("Invalid rules format")
    return rules


def create_app(
    config: Optional[RuleCheckerConfig] = None,
    llm_client: Optional[LLMClient] = None,
    upload_store: Optional[UploadStore] = None,
) -> FastAPI:
    config = config or get_rule_checker_config()
    if llm_client is None:
        if not config.api_key:
            logger.warning(
                "%s is not set; rule checks will fail until it is configured",
                config.api_key_env,
            )
        llm_client = build_llm_client(config)
    upload_store = upload_store or UploadStore(
        config.upload.directory, config.upload.max_bytes
    )

    app = FastAPI(title="PDF Rule Checker API")
    app.state.config = config
    app.state.llm_client = llm_client
    app.state.upload_store = upload_store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def limit_upload_size(request: Request, call_next):
        content_length = request.headers.get("content-length", "")
        limit = config.upload.max_bytes + MULTIPART_ALLOWANCE_BYTES
        if content_length.isdigit() and int(content_length) > limit:
            logger.info(
                "Rejected upload content_length=%s limit=%s", content_length, limit
            )
            return JSONResponse(
                status_code=UploadTooLargeError.status_code,
                content={"error": "File too large"},
            )
        return await call_next(request)

    @app.exception_handler(RuleCheckError)
    async def rule_check_error_handler(_request: Request, exc: RuleCheckError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        _request: Request, exc: RequestValidationError
    ):
        fields = {error["loc"][-1] for error in exc.errors() if error.get("loc")}
        message = next(
            (text for field, text in FIELD_ERRORS.items() if field in fields),
            "Invalid request",
        )
        logger.info("Rejected malformed form fields=%s", sorted(map(str, fields)))
        return JSONResponse(
            status_code=ValidationError.status_code, content={"error": message}
        )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post(
        "/api/check-pdf", response_model=CheckResponse, responses=ERROR_RESPONSES
    )
    async def check_pdf(
        request: Request,
        pdf: Optional[UploadFile] = File(None),
        rules: Optional[str] = Form(None),
    ) -> CheckResponse:
        if pdf is None or not pdf.filename:
            raise ValidationError("No PDF file uploaded")

        state = request.app.state
        try:
            async with state.upload_store.stored(pdf) as stored:
                parsed_rules = parse_rules(rules)
                if not looks_like_pdf(stored.read_head(HEADER_SEARCH_BYTES)):
                    raise ValidationError("Uploaded file is not a PDF")
                pdf_bytes = stored.read_bytes()

            logger.info(
                "Checking PDF filename=%s bytes=%s rules=%s",
                pdf.filename,
                len(pdf_bytes),
                len(parsed_rules),
            )
            pdf_text = await run_in_threadpool(extract_text, pdf_bytes)
            if not pdf_text or not pdf_text.strip():
                raise ExtractionError("Could not extract text from PDF")

            results = await evaluate_rules(
                pdf_text, parsed_rules, state.llm_client, state.config
            )
        except RuleCheckError:
            raise
        except Exception as exc:
            logger.exception("Error processing PDF filename=%s", pdf.filename)
            raise InternalError(str(exc)) from exc
        return CheckResponse(results=results)

    return app


app = create_app()
