#!/usr/bin/env python
"""Command-line interface for kube-pod-exec.

This module provides the main CLI entry point. It is the only place
that reads the environment and the only place that turns errors into
process exit codes.
"""

import sys
from typing import NoReturn

import click
from icecream import ic
from rich.markup import escape

from kube_pod_exec import __version__, console
from kube_pod_exec.dispatcher import ExecDispatcher
from kube_pod_exec.exceptions import PodExecError, RemoteExitError
from kube_pod_exec.models import ExecConfig
from kube_pod_exec.session import ClusterSession

# Exit status for every local or cluster-communication failure
FAILURE_EXIT_CODE = 1


def fail(message: str) -> NoReturn:
    """Print a diagnostic and exit with the local failure status.

    Args:
        message: Plain-text description of the failure.

    """
    console.error(escape(message))
    sys.exit(FAILURE_EXIT_CODE)


def build_config(
    label_filter: str | None,
    container: str | None,
    kubeconfig: str | None,
    timeout: float | None,
    command: tuple[str, ...],
) -> ExecConfig:
    """Validate CLI input and collect it into an ExecConfig.

    Exits with the failure status when a required value is missing, before
    any cluster call is made.

    """
    if not label_filter:
        fail("No pod filter set (use --filter or the FILTER environment variable)")
    if not container:
        fail("No container set (use --container or the CONTAINER environment variable)")
    if not command:
        fail("No command given")

    return ExecConfig(
        label_filter=str(label_filter),
        container=str(container),
        command=command,
        kubeconfig=kubeconfig or None,
        timeout=timeout,
    )


@click.command(
    help="Run a command in the first running pod matching a label filter",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
@click.option("--filter", "label_filter", envvar="FILTER", required=False, help="filter to apply to pod listing")
@click.option("--container", envvar="CONTAINER", required=False, help="container to execute command in")
@click.option("--kubeconfig", envvar="KUBECONFIG", required=False, help="kubeconfig path")
@click.option(
    "--timeout",
    required=False,
    type=click.FloatRange(min=0, min_open=True),
    help="seconds to wait for the command to exit once the exec channel is open; connection setup is not bounded",
)
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
def cli(
    version: bool,
    debug: bool,
    label_filter: str | None,
    container: str | None,
    kubeconfig: str | None,
    timeout: float | None,
    command: tuple[str, ...],
) -> None:
    """Process CLI arguments and run the command in the selected pod.

    Everything from the first positional argument on is the command and
    its arguments, passed to the pod verbatim.

    Args:
        version: Print version and exit.
        debug: Enable debug output.
        label_filter: Label selector used to find the pod.
        container: Container to run the command in.
        kubeconfig: Path to the kubeconfig file.
        timeout: Seconds to wait for the remote command.
        command: Program and arguments to execute.

    """
    if debug:
        ic.enable()
    else:
        ic.disable()

    if version:
        click.echo(__version__)
        return

    exec_config = build_config(label_filter, container, kubeconfig, timeout, command)
    ic(exec_config)

    try:
        with ClusterSession(kubeconfig=exec_config.kubeconfig) as session:
            if debug:
                console.step(
                    f"Working with {console.highlight(escape(session.context))} context "
                    f"in namespace {console.highlight(escape(session.namespace))}"
                )
            ExecDispatcher(session).dispatch(exec_config)
    except RemoteExitError as e:
        ic(e.status)
        sys.exit(e.status)
    except PodExecError as e:
        fail(str(e))


if __name__ == "__main__":
    cli()
