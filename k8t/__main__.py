"""Entry point for `python -m k8t`.

Usage:
    python -m k8t analyze imagepullbackoff my-pod -n default
"""

from __future__ import annotations

from k8t.cli import cli

cli()
