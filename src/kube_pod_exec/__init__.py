"""kube-pod-exec: run a command in a pod chosen by label filter.

This package selects the first running pod matching a label selector and
executes a command in one of its containers, relaying stdout and stderr
and propagating the remote exit status.

Example usage:
    from kube_pod_exec import ClusterSession, ExecDispatcher, ExecConfig

    with ClusterSession() as session:
        ExecDispatcher(session).dispatch(
            ExecConfig(label_filter="app=web", container="app", command=("true",))
        )
"""

__version__ = "0.1.0"

from kube_pod_exec.cli import cli
from kube_pod_exec.dispatcher import ExecDispatcher
from kube_pod_exec.exceptions import (
    ConfigurationError,
    ListError,
    NotFoundError,
    PodExecError,
    RemoteExitError,
    StreamError,
    StreamTimeoutError,
)
from kube_pod_exec.models import ExecConfig, ExecRequest, PodInfo, PodPhase
from kube_pod_exec.selector import PodSelector
from kube_pod_exec.session import ClusterSession
from kube_pod_exec.streamer import ExecStreamer

__all__ = [
    # Version
    "__version__",
    # Main CLI
    "cli",
    # Classes
    "ClusterSession",
    "ExecDispatcher",
    "ExecStreamer",
    "PodSelector",
    # Models
    "ExecConfig",
    "ExecRequest",
    "PodInfo",
    "PodPhase",
    # Exceptions
    "PodExecError",
    "ConfigurationError",
    "ListError",
    "NotFoundError",
    "StreamError",
    "StreamTimeoutError",
    "RemoteExitError",
]
