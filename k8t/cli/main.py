"""k8t command-line interface.

    k8t [--kubeconfig PATH] [--verbose] [--quiet] [--no-color] COMMAND

Commands:
    version                              Print version information.
    analyze imagepullbackoff POD         Diagnose an ImagePullBackOff pod.
    check [-A | -n NS]                   Scan namespaces for unhealthy pods.

Exit codes are derived from the error kind (see EXIT_CODES); an analysis
that finds no image pull issue is a success.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import replace
from typing import NoReturn

import click

from k8t import __version__
from k8t.analyzer.coordinator import AnalysisCoordinator
from k8t.cluster.client import ClusterClient
from k8t.cluster.validation import validate_namespace, validate_pod_name
from k8t.config import load_config, parse_duration, parse_format
from k8t.errors import (
    AnalysisTimeoutError,
    ErrorKind,
    InvalidInputError,
    K8tError,
    PermissionDeniedError,
    PodNotFoundError,
)
from k8t.models.analysis import AnalysisReport, PodIssue
from k8t.models.config import AnalysisConfig, K8tConfig
from k8t.observability.logging import get_logger, level_for, setup_logging
from k8t.output.formatter import render

EXIT_INTERNAL = 1
EXIT_FAILURE = 2

EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 3,
    ErrorKind.PERMISSION_DENIED: 2,
    ErrorKind.TIMEOUT: 4,
    ErrorKind.INVALID_INPUT: 2,
    ErrorKind.INTERNAL: EXIT_INTERNAL,
}


# ---------------------------------------------------------------------------
# Error guidance
# ---------------------------------------------------------------------------


def _not_found_help(exc: PodNotFoundError) -> list[str]:
    return [
        "ERROR: Pod not found",
        "",
        f"Pod '{exc.pod_name}' does not exist in namespace '{exc.namespace}'.",
        "",
        "Suggestions:",
        "  • Check pod name spelling",
        "  • Verify namespace is correct",
        f"  • List pods: kubectl get pods -n {exc.namespace}",
    ]


def _permission_help(exc: PermissionDeniedError) -> list[str]:
    return [
        "ERROR: Insufficient RBAC permissions",
        "",
        f"Required: {exc.resource}/{exc.verb} in namespace '{exc.namespace}'",
        "",
        "To grant permissions, create a Role and RoleBinding:",
        "",
        f"kubectl create role k8t-reader --verb=get,list --resource=pods,events -n {exc.namespace}",
        f"kubectl create rolebinding k8t-binding --role=k8t-reader --user=<your-user> -n {exc.namespace}",
    ]


def _timeout_help(exc: AnalysisTimeoutError) -> list[str]:
    return [
        "ERROR: Analysis timeout",
        "",
        f"Operation '{exc.operation}' did not complete within {exc.timeout_seconds:g}s",
        "",
        "Suggestions:",
        "  • Retry the analysis",
        "  • Increase timeout: --timeout 60s",
        "  • Check cluster connectivity",
    ]


def _invalid_input_help(exc: InvalidInputError) -> list[str]:
    return [f"ERROR: Invalid {exc.field}", "", exc.message]


def _internal_help(exc: K8tError) -> list[str]:
    return [
        "ERROR: Could not build a consistent diagnostic finding",
        "",
        str(exc),
        "",
        "The pod is in an image pull failure state but too few recent failure",
        "events remain to classify it (events expire after about one hour).",
        "",
        "Suggestions:",
        "  • Check recent events: kubectl describe pod <pod-name>",
        "  • Delete the pod to trigger a fresh pull, then re-run the analysis",
    ]


_HELP: dict[ErrorKind, Callable[..., list[str]]] = {
    ErrorKind.NOT_FOUND: _not_found_help,
    ErrorKind.PERMISSION_DENIED: _permission_help,
    ErrorKind.TIMEOUT: _timeout_help,
    ErrorKind.INVALID_INPUT: _invalid_input_help,
    ErrorKind.INTERNAL: _internal_help,
}


def _fail(exc: K8tError) -> NoReturn:
    """Print guidance for *exc* on stderr and exit with its mapped code."""
    get_logger("cli").error("command_failed", kind=str(exc.kind), error=str(exc))
    for line in _HELP[exc.kind](exc):
        click.echo(line, err=True)
    raise SystemExit(EXIT_CODES[exc.kind])


# ---------------------------------------------------------------------------
# Async runners
# ---------------------------------------------------------------------------


async def _run_analysis(kubeconfig: str, config: AnalysisConfig, pod_name: str) -> AnalysisReport:
    client = await ClusterClient.connect(kubeconfig)
    try:
        await client.validate()
        coordinator = AnalysisCoordinator(client, config)
        return await coordinator.analyze_pod(pod_name, config.namespace)
    finally:
        await client.close()


async def _run_scan(kubeconfig: str, config: AnalysisConfig, namespaces: list[str] | None) -> list[PodIssue]:
    client = await ClusterClient.connect(kubeconfig)
    try:
        await client.validate()
        coordinator = AnalysisCoordinator(client, config)
        return await coordinator.scan(namespaces)
    finally:
        await client.close()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.group()
@click.option("--kubeconfig", default=None, help="Path to kubeconfig file (default: $KUBECONFIG or ~/.kube/config).")
@click.option("--verbose", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", is_flag=True, help="Suppress all output except errors.")
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.pass_context
def cli(ctx: click.Context, kubeconfig: str | None, verbose: bool, quiet: bool, no_color: bool) -> None:
    """k8t: diagnose ImagePullBackOff errors in Kubernetes pods."""
    try:
        config = load_config()
    except ValueError as exc:
        raise click.UsageError(f"invalid K8T_* environment: {exc}") from exc

    config = replace(
        config,
        cluster=replace(config.cluster, kubeconfig=kubeconfig or config.cluster.kubeconfig),
        output=replace(config.output, no_color=no_color or config.output.no_color, quiet=quiet),
        log=replace(config.log, level=level_for(verbose=verbose, quiet=quiet, default=config.log.level)),
    )
    setup_logging(config.log.level)
    ctx.obj = config


@cli.command()
def version() -> None:
    """Print version information."""
    click.echo(f"k8t version {__version__}")


@cli.group()
def analyze() -> None:
    """Analyze Kubernetes resources for issues."""


@analyze.command("imagepullbackoff")
@click.argument("pod_name")
@click.option("-n", "--namespace", default=None, help="Kubernetes namespace.")
@click.option("-o", "--output", "output_format", default=None, help="Output format (text, json, yaml).")
@click.option("--timeout", default=None, help="Analysis timeout duration, e.g. 30s or 1m.")
@click.option("--audit", is_flag=True, help="Include the cluster access audit log in the report.")
@click.pass_obj
def imagepullbackoff(
    config: K8tConfig,
    pod_name: str,
    namespace: str | None,
    output_format: str | None,
    timeout: str | None,
    audit: bool,
) -> None:
    """Analyze ImagePullBackOff errors for POD_NAME and suggest remediation."""
    try:
        fmt = parse_format(output_format) if output_format is not None else config.output.format
        timeout_seconds = parse_duration(timeout) if timeout is not None else config.analysis.timeout_seconds
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    analysis = replace(
        config.analysis,
        namespace=namespace or config.analysis.namespace,
        timeout_seconds=timeout_seconds,
        include_audit=audit or config.analysis.include_audit,
    )

    try:
        validate_namespace(analysis.namespace)
        validate_pod_name(pod_name)
    except InvalidInputError as exc:
        _fail(exc)

    try:
        report = asyncio.run(_run_analysis(config.cluster.kubeconfig, analysis, pod_name))
    except K8tError as exc:
        _fail(exc)
    except Exception as exc:
        get_logger("cli").error("analysis_failed", error=str(exc))
        click.echo(f"ERROR: {exc}", err=True)
        raise SystemExit(EXIT_FAILURE) from exc

    if not report.has_issues and not config.output.quiet:
        click.echo(
            f"INFO: Pod '{pod_name}' in namespace '{analysis.namespace}' does not have ImagePullBackOff status.",
            err=True,
        )
    if not config.output.quiet:
        click.echo(render(report, fmt, no_color=config.output.no_color), nl=False)


@cli.command()
@click.option("-A", "--all-namespaces", is_flag=True, help="Check all namespaces.")
@click.option("-n", "--namespace", default=None, help="Namespace to check.")
@click.pass_obj
def check(config: K8tConfig, all_namespaces: bool, namespace: str | None) -> None:
    """Scan the cluster for pods with common problems."""
    namespaces = None if all_namespaces else [namespace or config.analysis.namespace]

    try:
        for ns in namespaces or ():
            validate_namespace(ns)
    except InvalidInputError as exc:
        _fail(exc)

    try:
        issues = asyncio.run(_run_scan(config.cluster.kubeconfig, config.analysis, namespaces))
    except K8tError as exc:
        _fail(exc)
    except Exception as exc:
        get_logger("cli").error("scan_failed", error=str(exc))
        click.echo(f"ERROR: {exc}", err=True)
        raise SystemExit(EXIT_FAILURE) from exc

    if not config.output.quiet:
        for issue in issues:
            click.echo(f"[{issue.issue_type}] Pod: {issue.namespace}/{issue.pod_name} - Status: {issue.phase}")
        click.echo("\n--- Summary ---")
        if not issues:
            click.echo("No issues found!")
        else:
            click.echo(f"Total issues found: {len(issues)}")
            click.echo("\nIssues by namespace:")
            by_namespace: dict[str, int] = {}
            for issue in issues:
                by_namespace[issue.namespace] = by_namespace.get(issue.namespace, 0) + 1
            for ns, count in by_namespace.items():
                click.echo(f"  {ns}: {count} issue(s)")

    if issues:
        raise SystemExit(EXIT_INTERNAL)
