"""k8t command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``k8t`` script).
"""

from k8t.cli.main import cli

__all__ = ["cli"]
