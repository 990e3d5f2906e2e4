"""Exec dispatcher.

Composes pod selection and command streaming for one invocation: one
list call, then at most one exec call.
"""

from icecream import ic

from kube_pod_exec.exceptions import NotFoundError
from kube_pod_exec.models import ExecConfig, PodInfo
from kube_pod_exec.selector import PodSelector
from kube_pod_exec.session import ClusterSession
from kube_pod_exec.streamer import ExecStreamer


class ExecDispatcher:
    """Runs a command in the pod selected by a label filter.

    Attributes:
        session: The cluster session shared by selector and streamer.
        selector: Resolves the label filter to a pod.
        streamer: Runs the command in the chosen pod.

    """

    def __init__(
        self,
        session: ClusterSession,
        selector: PodSelector | None = None,
        streamer: ExecStreamer | None = None,
    ) -> None:
        self.session = session
        self.selector = selector or PodSelector(session)
        self.streamer = streamer or ExecStreamer(session)

    def dispatch(self, exec_config: ExecConfig) -> PodInfo:
        """Select a pod and run the configured command in it.

        Args:
            exec_config: Filter, container, command and timeout for this run.

        Returns:
            The pod the command ran in.

        Raises:
            ValueError: If the filter or command is empty.
            ListError: If listing pods fails.
            NotFoundError: If no matching pod is Running. No exec is attempted.
            RemoteExitError: If the remote command exits non-zero.
            StreamError: If the exec channel fails.

        """
        if not exec_config.command:
            raise ValueError("Command must contain at least one token")

        pod = self.selector.select_by_filter(exec_config.label_filter)
        if pod is None:
            raise NotFoundError(
                f"No running pod matches '{exec_config.label_filter}' "
                f"in namespace '{self.session.namespace}'"
            )
        ic(pod)

        self.streamer.run(
            pod,
            exec_config.container,
            exec_config.command,
            timeout=exec_config.timeout,
        )
        return pod
