"""Markdown rendering of report bundles."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .bundle import ReportEnvelopeBundle

__all__ = ["SUPPORTED_FORMATS", "render_report"]

SUPPORTED_FORMATS: tuple[str, ...] = ("markdown", "md")


def render_report(bundle: ReportEnvelopeBundle | Mapping[str, Any], fmt: str = "markdown") -> str:
    """
    Render a report bundle as a markdown summary.

    Args:
        bundle (ReportEnvelopeBundle | Mapping[str, Any]): Report bundle or its JSON mapping.
        fmt (str): "markdown" or "md".

    Returns:
        str: Markdown text (no trailing newline).

    Raises:
        ValueError: If fmt is not a supported format.
        pydantic.ValidationError: If a mapping is not a valid report bundle.
    """
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported format: {fmt}")
    if not isinstance(bundle, ReportEnvelopeBundle):
        bundle = ReportEnvelopeBundle.model_validate(bundle)

    report = bundle.report
    summary = report.summary
    lines = [
        f"# {report.module.name} report",
        "",
        f"- Report ID: {report.report_id}",
        f"- Report Type: {report.report_type}",
        f"- Tenant: {report.tenant_context.tenant_id}",
        f"- Project: {report.tenant_context.project_id}",
        f"- Generated At: {report.generated_at}",
        f"- Trace ID: {bundle.trace_id}",
        f"- Fingerprint: {bundle.canonicalization.hash}",
        "",
        "## Summary",
        "",
        f"- Total Findings: {summary.total_findings}",
        f"- Total Recommendations: {summary.total_recommendations}",
        f"- Actionable Recommendations: {summary.actionable_count}",
        "",
        "## Recommendations",
        "",
    ]

    if not report.recommendations:
        lines.append("No recommendations generated.")
    for rec in report.recommendations:
        lines.append(f"- **{rec.title}** ({rec.severity})")
        lines.append(f"  - {rec.description}")
        lines.append(f"  - Action: {rec.action}")

    lines.extend(["", "## Job Requests", ""])
    if not report.job_requests:
        lines.append("No job requests generated.")
    for req in report.job_requests:
        lines.append(f"- {req.job_type} (priority: {req.priority})")

    return "\n".join(lines)
