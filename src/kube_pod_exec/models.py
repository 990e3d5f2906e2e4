"""Data models for kube-pod-exec.

This module provides type-safe data structures for the application,
replacing the loosely-typed objects returned by the Kubernetes client
with small immutable snapshots.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple


class PodPhase(str, Enum):
    """Lifecycle phase of a pod as reported by the cluster.

    Inherits from str so values compare equal to the raw API strings.
    """

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str | None) -> "PodPhase":
        """Map a raw API phase to a PodPhase, falling back to UNKNOWN.

        Args:
            value: The phase string from the pod status, possibly None.

        Returns:
            The matching PodPhase, or PodPhase.UNKNOWN for missing or
            unrecognised values.

        """
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class PodInfo(NamedTuple):
    """Read-only snapshot of a pod returned by a list call.

    Attributes:
        name: The pod name.
        namespace: The namespace the pod lives in.
        phase: The pod's lifecycle phase at list time.
        containers: Names of the containers declared in the pod spec.

    """

    name: str
    namespace: str
    phase: PodPhase
    containers: tuple[str, ...]

    @classmethod
    def from_api(cls, pod: Any) -> "PodInfo":
        """Build a snapshot from a kubernetes.client.V1Pod object."""
        spec_containers = (pod.spec.containers or []) if pod.spec else []
        return cls(
            name=pod.metadata.name,
            namespace=pod.metadata.namespace,
            phase=PodPhase.parse(pod.status.phase if pod.status else None),
            containers=tuple(c.name for c in spec_containers),
        )

    @property
    def is_running(self) -> bool:
        return self.phase is PodPhase.RUNNING


@dataclass(frozen=True, slots=True)
class ExecConfig:
    """Explicit configuration for one invocation, built at the CLI boundary.

    Attributes:
        label_filter: Label selector used to find the target pod.
        container: Name of the container to run the command in.
        command: Command tokens, program first, passed verbatim.
        kubeconfig: Optional path to a kubeconfig file.
        timeout: Optional limit in seconds for the exec relay.

    """

    label_filter: str
    container: str
    command: tuple[str, ...]
    kubeconfig: str | None = None
    timeout: float | None = None


@dataclass(frozen=True, slots=True)
class ExecRequest:
    """A single command to execute inside one container of one pod.

    Attributes:
        pod: The target pod.
        container: The target container name, validated server-side.
        command: Ordered argv-style tokens, never shell-joined.

    Raises:
        ValueError: If the command has no tokens.

    """

    pod: PodInfo
    container: str
    command: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.command:
            raise ValueError("Command must contain at least one token")
