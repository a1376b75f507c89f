"""Report rendering and audit trail.

Exposes:
    render         -- Render an AnalysisReport as text, JSON or YAML.
    report_to_dict -- The field set shared by the structured formats.
    AuditLogger    -- Records cluster access for the report's audit_log.
"""

from k8t.output.audit import AuditLogger
from k8t.output.formatter import render, report_to_dict
from k8t.output.text import render_text

__all__ = ["AuditLogger", "render", "render_text", "report_to_dict"]
