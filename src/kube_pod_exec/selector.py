"""Pod selection by label filter.

This module provides the PodSelector class, which resolves a label
selector to at most one pod that can accept an exec request.
"""

from icecream import ic
from kubernetes.client.exceptions import ApiException
from rich.markup import escape
from urllib3.exceptions import MaxRetryError

from kube_pod_exec import console
from kube_pod_exec.exceptions import ListError
from kube_pod_exec.models import PodInfo
from kube_pod_exec.session import ClusterSession


class PodSelector:
    """Chooses the pod a command will run in.

    The policy is "first Running pod in the order the API server returns
    them". Ties between several Running pods are therefore decided by the
    server, and a warning names the pod that was picked.

    Attributes:
        session: The cluster session used for list calls.

    """

    def __init__(self, session: ClusterSession) -> None:
        self.session = session

    def list_pods(self, label_filter: str) -> list[PodInfo]:
        """List pods in the session namespace matching a label selector.

        Args:
            label_filter: Label selector expression, passed to the API
                          server uninterpreted.

        Returns:
            Pod snapshots in server-provided order.

        Raises:
            ListError: If the list call fails.

        """
        try:
            pod_list = self.session.core_v1.list_namespaced_pod(
                self.session.namespace,
                label_selector=label_filter,
            )
        except ApiException as e:
            raise ListError(
                f"Failed to list pods in namespace '{self.session.namespace}': {e.status} {e.reason}"
            ) from e
        except MaxRetryError as e:
            raise ListError(f"Failed to connect to the Kubernetes cluster: {e.reason}") from e

        pods = [PodInfo.from_api(item) for item in pod_list.items]
        ic(pods)
        return pods

    def select_by_filter(self, label_filter: str) -> PodInfo | None:
        """Return the first Running pod matching the filter.

        Args:
            label_filter: Non-empty label selector expression.

        Returns:
            The chosen pod, or None when no matching pod is Running.
            None is a normal outcome, distinct from a failed list call.

        Raises:
            ValueError: If label_filter is empty.
            ListError: If the list call fails.

        """
        if not label_filter:
            raise ValueError("Label filter cannot be empty")

        running = [pod for pod in self.list_pods(label_filter) if pod.is_running]
        if not running:
            return None

        pod = running[0]
        if len(running) > 1:
            console.warning(
                f"{len(running)} running pods match '{escape(label_filter)}'. "
                f"Using [yellow]{pod.name}[/yellow]."
            )
        return pod
