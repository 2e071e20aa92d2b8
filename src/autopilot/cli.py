"""
Command-line entry point: ``autopilot <command> [options]``.

Commands
- canonicalize FILE            print the canonical JSON string of a document
- hash FILE                    print its sha256 digest and short hash (``--short``, ``--prefix``)
- idempotency-key FILE         derive the idempotency key of a job request
- bundle FILE                  build a fingerprinted job request bundle
- verify FILE                  validate a job request or report bundle and its fingerprint
- validate FILE                business-rule validation of a request (``--batch``)
- redact FILE                  redact a document (hint config, or ``--denylist``)
- render FILE                  render a report bundle as markdown
- profiles                     list built-in profiles (``--id``, ``--category``, ``--extend``)
- version                      print package and contract versions

FILE may be ``-`` for stdin. Exit codes: 0 success, 2 validation failure, 3 dependency
failure, 4 unexpected bug. Logs go to stderr as JSON lines; ``--artifacts`` also writes
``<artifacts_dir>/<run_id>/{logs.jsonl, summary.json}``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .core.canonical import canonicalize_json, content_addressable_id, short_hash, stable_hash
from .core.constants import SHORT_HASH_LENGTH
from .core.envelopes import iso_timestamp
from .core.redaction import DEFAULT_REDACTION_CONFIG, redact, redact_keys
from .core.serde import json_dumps_pretty, json_loads
from .core.versioning import CONTRACT_VERSION
from .io.artifacts import ArtifactLogHandler, ArtifactSummary, ArtifactWriter
from .io.config import AutopilotSettings
from .io.errors import IoConfigError
from .io.fs import write_text_atomic
from .jobforge.bundle import (
    build_job_request_bundle,
    serialize_bundle,
    validate_bundle,
    validate_report_bundle,
)
from .jobforge.idempotency import derive_idempotency_key
from .jobforge.render import SUPPORTED_FORMATS, render_report
from .jobforge.validation import ValidationResult, validate_batch, validate_request
from .profiles.registry import (
    create_custom_profile,
    get_profile,
    get_profiles_by_category,
    list_profiles,
)
from .runner.errors import (
    EXIT_SUCCESS,
    EXIT_VALIDATION,
    exit_code_for_error,
    to_error_envelope,
    validation_error,
)
from .runner.logging import configure_logging
from .runner.retry import generate_idempotency_key

logger = logging.getLogger(__name__)

Handler = Callable[[argparse.Namespace, AutopilotSettings], int]


def _read_json(path: str) -> Any:
    """Load a JSON document from a path or stdin ("-")."""
    try:
        text = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise validation_error(f"file not found: {path}") from e
    try:
        return json_loads(text)
    except json.JSONDecodeError as e:
        raise validation_error(f"invalid JSON in {path}: {e}") from e


def _emit(text: str, out: str | None = None) -> None:
    if out:
        write_text_atomic(out, text + "\n")
        logger.info("wrote output", extra={"path": out})
    else:
        print(text)


def _print_result(result: ValidationResult) -> int:
    print(
        json_dumps_pretty(
            {
                "valid": result.valid,
                "issues": [
                    {"path": i.path, "message": i.message, "code": i.code} for i in result.issues
                ],
            }
        )
    )
    return EXIT_SUCCESS if result.valid else EXIT_VALIDATION


# ============================================================================
# Commands
# ============================================================================


def _cmd_canonicalize(args: argparse.Namespace, settings: AutopilotSettings) -> int:
    _emit(canonicalize_json(_read_json(args.file)), args.out)
    return EXIT_SUCCESS


def _cmd_hash(args: argparse.Namespace, settings: AutopilotSettings) -> int:
    doc = _read_json(args.file)
    if args.prefix is not None:
        print(content_addressable_id(doc, args.prefix or None))
    elif args.short:
        print(short_hash(doc))
    else:
        digest = stable_hash(doc)
        print(digest)
        print(digest[:SHORT_HASH_LENGTH])
    return EXIT_SUCCESS


def _cmd_idempotency_key(args: argparse.Namespace, settings: AutopilotSettings) -> int:
    print(derive_idempotency_key(_read_json(args.file)))
    return EXIT_SUCCESS


def _cmd_bundle(args: argparse.Namespace, settings: AutopilotSettings) -> int:
    doc = _read_json(args.file)
    requests = doc.get("requests") if isinstance(doc, dict) else doc
    if not isinstance(requests, list) or not requests:
        raise validation_error("expected a non-empty list of job requests")

    first = requests[0] if isinstance(requests[0], dict) else {}
    tenant = first.get("tenant_context")
    if not isinstance(tenant, dict):
        tenant = {}
    tenant_id = args.tenant or tenant.get("tenant_id")
    project_id = args.project or tenant.get("project_id")
    if not tenant_id or not project_id:
        raise validation_error("tenant and project are required (--tenant/--project)")

    bundle = build_job_request_bundle(
        requests,
        tenant_id=tenant_id,
        project_id=project_id,
        trace_id=args.trace or args.run_id,
        module_id=args.module_id or settings.module_id,
        stable_output=args.stable or settings.stable_output,
    )
    _emit(serialize_bundle(bundle), args.out)
    return EXIT_SUCCESS


def _cmd_verify(args: argparse.Namespace, settings: AutopilotSettings) -> int:
    doc = _read_json(args.file)
    is_report = isinstance(doc, dict) and "report" in doc
    result = validate_report_bundle(doc) if is_report else validate_bundle(doc)
    print(json_dumps_pretty({"valid": result.valid, "errors": result.errors}))
    return EXIT_SUCCESS if result.valid else EXIT_VALIDATION


def _cmd_validate(args: argparse.Namespace, settings: AutopilotSettings) -> int:
    doc = _read_json(args.file)
    return _print_result(validate_batch(doc) if args.batch else validate_request(doc))


def _cmd_redact(args: argparse.Namespace, settings: AutopilotSettings) -> int:
    doc = _read_json(args.file)
    if args.denylist:
        out = redact_keys(doc, settings.extra_deny_keys)
    else:
        out = redact(doc, DEFAULT_REDACTION_CONFIG)
    _emit(json_dumps_pretty(out), args.out)
    return EXIT_SUCCESS


def _cmd_render(args: argparse.Namespace, settings: AutopilotSettings) -> int:
    _emit(render_report(_read_json(args.file), args.format), args.out)
    return EXIT_SUCCESS


def _cmd_profiles(args: argparse.Namespace, settings: AutopilotSettings) -> int:
    if args.extend:
        profile = create_custom_profile(args.id or "base", _read_json(args.extend))
        _emit(json_dumps_pretty(profile), args.out)
    elif args.id:
        _emit(json_dumps_pretty(get_profile(args.id)), args.out)
    elif args.category:
        for profile in get_profiles_by_category(args.category):
            print(profile.id)
    else:
        for profile_id in list_profiles():
            print(profile_id)
    return EXIT_SUCCESS


def _package_version() -> str:
    try:
        return version("autopilot-contracts")
    except PackageNotFoundError:
        return "unknown"


def _cmd_version(args: argparse.Namespace, settings: AutopilotSettings) -> int:
    print(f"autopilot-contracts {_package_version()} (contract {CONTRACT_VERSION})")
    return EXIT_SUCCESS


# ============================================================================
# Parser
# ============================================================================


def _common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=str, default=None, help="Explicit TOML config path.")
    p.add_argument(
        "--no-env",
        action="store_true",
        help="Do not auto-load .env (by default, .env is loaded if present).",
    )
    p.add_argument("--run-id", type=str, default=None, help="Run identifier for logs/artifacts.")
    p.add_argument(
        "--artifacts",
        action="store_true",
        help="Write logs.jsonl and summary.json under <artifacts_dir>/<run_id>.",
    )


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="autopilot", description="Autopilot contracts: canonical hashing and job bundles."
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("canonicalize", help="Print the canonical JSON string.")
    c.add_argument("file")
    c.add_argument("--out", type=str, default=None)
    c.set_defaults(handler=_cmd_canonicalize)

    c = sub.add_parser(
        "hash", help="Print the sha256 digest and short hash of the canonical JSON."
    )
    c.add_argument("file")
    c.add_argument("--short", action="store_true", help="First 16 hex characters only.")
    c.add_argument(
        "--prefix", type=str, default=None, help="Content-addressable id '<prefix>-<short>'."
    )
    c.set_defaults(handler=_cmd_hash)

    c = sub.add_parser("idempotency-key", help="Derive the idempotency key of a job request.")
    c.add_argument("file")
    c.set_defaults(handler=_cmd_idempotency_key)

    c = sub.add_parser("bundle", help="Build a fingerprinted job request bundle.")
    c.add_argument("file")
    c.add_argument("--tenant", type=str, default=None)
    c.add_argument("--project", type=str, default=None)
    c.add_argument("--trace", type=str, default=None, help="Trace id (defaults to the run id).")
    c.add_argument("--module-id", type=str, default=None)
    c.add_argument("--stable", action="store_true", help="Use the fixed placeholder timestamp.")
    c.add_argument("--out", type=str, default=None)
    c.set_defaults(handler=_cmd_bundle)

    c = sub.add_parser("verify", help="Validate a bundle and check its fingerprint.")
    c.add_argument("file")
    c.set_defaults(handler=_cmd_verify)

    c = sub.add_parser("validate", help="Validate a job request against business rules.")
    c.add_argument("file")
    c.add_argument("--batch", action="store_true", help="Input is a job request batch.")
    c.set_defaults(handler=_cmd_validate)

    c = sub.add_parser("redact", help="Redact sensitive fields.")
    c.add_argument("file")
    c.add_argument("--denylist", action="store_true", help="Use key denylist redaction.")
    c.add_argument("--out", type=str, default=None)
    c.set_defaults(handler=_cmd_redact)

    c = sub.add_parser("render", help="Render a report bundle.")
    c.add_argument("file")
    c.add_argument("--format", type=str, default="markdown", choices=SUPPORTED_FORMATS)
    c.add_argument("--out", type=str, default=None)
    c.set_defaults(handler=_cmd_render)

    c = sub.add_parser("profiles", help="List built-in profiles or print one.")
    c.add_argument("--id", type=str, default=None, help="Print this profile as JSON.")
    c.add_argument("--category", type=str, default=None, help="List ids in a category.")
    c.add_argument(
        "--extend", type=str, default=None, help="Overrides file layered over --id (or base)."
    )
    c.add_argument("--out", type=str, default=None)
    c.set_defaults(handler=_cmd_profiles)

    c = sub.add_parser("version", help="Print versions.")
    c.set_defaults(handler=_cmd_version)

    for parser in sub.choices.values():
        _common(parser)
    return p


def _execute(args: argparse.Namespace) -> int:
    if not args.no_env:
        load_dotenv(Path.cwd() / ".env", override=False)

    try:
        settings = AutopilotSettings.load(args.config)
    except IoConfigError as e:
        err = validation_error(str(e))
        print(f"error: {err.envelope.user_message}", file=sys.stderr)
        return err.exit_code

    args.run_id = args.run_id or generate_idempotency_key("run")
    root = configure_logging(
        settings.log_level,
        json_lines=settings.log_json,
        run_id=args.run_id,
        extra_deny_keys=settings.extra_deny_keys,
    )

    writer: ArtifactWriter | None = None
    log_handler: ArtifactLogHandler | None = None
    if args.artifacts:
        writer = ArtifactWriter(
            args.run_id,
            settings.artifacts_dir,
            redaction_enabled=settings.redaction_enabled,
            extra_deny_keys=settings.extra_deny_keys,
        )
        writer.init()
        log_handler = ArtifactLogHandler(writer)
        root.addHandler(log_handler)

    started_at = iso_timestamp()
    error: dict[str, Any] | None = None
    handler: Handler = args.handler
    try:
        code = handler(args, settings)
    except Exception as e:
        envelope = to_error_envelope(e)
        code = exit_code_for_error(e)
        error = envelope.to_dict()
        logger.error(envelope.message, extra={"code": envelope.code, "exit_code": code})
        print(f"error: {envelope.user_message}", file=sys.stderr)

    if writer is not None:
        root.removeHandler(log_handler)
        writer.flush_logs()
        writer.write_summary(
            ArtifactSummary(
                run_id=args.run_id,
                command=args.cmd,
                status="success" if code == EXIT_SUCCESS else "failure",
                started_at=started_at,
                completed_at=iso_timestamp(),
                error=error,
                evidence_files=writer.evidence_files,
                log_line_count=writer.log_line_count,
            )
        )
    return code


def run(argv: list[str] | None = None) -> int:
    """Parse ``argv`` and run the command, returning its exit code."""
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_argparser()
    if not argv:
        parser.print_help()
        return EXIT_SUCCESS
    return _execute(parser.parse_args(argv))


def main(argv: list[str] | None = None) -> None:
    raise SystemExit(run(argv))


if __name__ == "__main__":
    main()
