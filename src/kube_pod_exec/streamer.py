"""Remote command execution over the pod exec subresource.

This module provides the ExecStreamer class, which runs one command in
one container, relays its stdout and stderr to the local streams while
it runs, and turns the remote exit status into a return or an exception.
"""

import sys
import threading
import time
from collections.abc import Callable, Sequence
from typing import Any, TextIO

import yaml
from icecream import ic
from kubernetes.client.exceptions import ApiException
from kubernetes.stream import stream
from kubernetes.stream.ws_client import ERROR_CHANNEL, _IgnoredIO
from websocket import WebSocketException

from kube_pod_exec.exceptions import RemoteExitError, StreamError, StreamTimeoutError
from kube_pod_exec.models import ExecRequest, PodInfo
from kube_pod_exec.session import ClusterSession

# Upper bound on how long a single wait for frames may block, so that
# timeout and cancellation are noticed while the remote command is silent.
POLL_INTERVAL = 1.0


def parse_exit_status(raw: str) -> int:
    """Decode the Status object sent on the exec error channel.

    Args:
        raw: The YAML/JSON payload read from the error channel.

    Returns:
        0 for a successful command, otherwise the remote exit code.

    Raises:
        StreamError: If the payload is missing, malformed, or reports a
            failure other than a non-zero exit code.

    """
    if not raw:
        raise StreamError("Exec stream closed without reporting an exit status")

    try:
        status = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise StreamError(f"Malformed exec status: {e}") from e

    if not isinstance(status, dict):
        raise StreamError(f"Malformed exec status: {raw!r}")

    if status.get("status") == "Success":
        return 0

    if status.get("reason") == "NonZeroExitCode":
        causes = (status.get("details") or {}).get("causes") or []
        for cause in causes:
            if cause.get("reason") == "ExitCode":
                try:
                    return int(cause["message"])
                except (KeyError, TypeError, ValueError) as e:
                    raise StreamError(f"Malformed exit code in exec status: {cause!r}") from e

    raise StreamError(f"Remote command failed: {status.get('message', raw)}")


class ExecStreamer:
    """Runs a command in a container and relays its output synchronously.

    Only stdout and stderr are requested; there is no stdin and no TTY, so
    interactive programs are not supported.

    Attributes:
        session: The cluster session whose client opens the exec channel.
        stdout: Local stream receiving the remote stdout.
        stderr: Local stream receiving the remote stderr.

    """

    def __init__(
        self,
        session: ClusterSession,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.session = session
        self.stdout: TextIO = stdout if stdout is not None else sys.stdout
        self.stderr: TextIO = stderr if stderr is not None else sys.stderr

    def run(
        self,
        pod: PodInfo,
        container: str,
        command: Sequence[str],
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        """Execute a command and block until the remote process exits.

        Args:
            pod: The target pod, already resolved by the caller.
            container: The container to run in, validated by the server.
            command: Non-empty argv tokens, each sent as its own argument.
            timeout: Seconds to wait for the remote process before giving
                     up. None waits indefinitely.
            cancel: Event that abandons the stream when set.

        Raises:
            ValueError: If command is empty. Raised before any network call.
            RemoteExitError: If the remote command exits non-zero.
            StreamTimeoutError: If timeout expires or cancel is set first.
            StreamError: If the channel cannot be opened, breaks, or ends
                without a usable exit status.

        """
        request = ExecRequest(pod=pod, container=container, command=tuple(command))
        ic(request)

        self.stdout.flush()
        self.stderr.flush()

        resp = self._open(request)
        try:
            raw_status = self._relay(resp, timeout=timeout, cancel=cancel)
        finally:
            resp.close()

        ic(raw_status)
        exit_code = parse_exit_status(raw_status)
        if exit_code != 0:
            raise RemoteExitError(exit_code)

    def _open(self, request: ExecRequest) -> Any:
        """Open the exec websocket for a request.

        stream() always builds its client with capture_all=True, which keeps
        a copy of every stdout/stderr frame. The copy is swapped for the
        client's discarding sink so relayed output is not retained.

        Returns:
            A live kubernetes.stream.ws_client.WSClient.

        Raises:
            StreamError: If the handshake or the request is rejected.

        """
        try:
            resp = stream(
                self.session.core_v1.connect_get_namespaced_pod_exec,
                request.pod.name,
                request.pod.namespace,
                container=request.container,
                command=list(request.command),
                stdin=False,
                stdout=True,
                stderr=True,
                tty=False,
                _preload_content=False,
            )
        except ApiException as e:
            raise StreamError(
                f"Failed to open exec stream to {request.pod.namespace}/{request.pod.name} "
                f"container '{request.container}': {e.reason}"
            ) from e
        resp._all = _IgnoredIO()
        return resp

    def _relay(self, resp: Any, *, timeout: float | None, cancel: threading.Event | None) -> str:
        """Forward output frames until the channel closes.

        Returns:
            The raw payload of the error channel.

        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while resp.is_open():
            self._forward(resp)
            if cancel is not None and cancel.is_set():
                raise StreamTimeoutError("Exec cancelled before the remote command exited")
            wait = POLL_INTERVAL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise StreamTimeoutError(f"Remote command did not exit within {timeout}s")
                wait = min(wait, remaining)
            _receive(resp.update, timeout=wait)
        # frames received together with the close frame
        self._forward(resp)
        return str(_receive(resp.read_channel, ERROR_CHANNEL))

    def _forward(self, resp: Any) -> None:
        _write(self.stdout, _receive(resp.read_stdout, timeout=0))
        _write(self.stderr, _receive(resp.read_stderr, timeout=0))


def _receive(call: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call a channel method, translating transport failures to StreamError."""
    try:
        return call(*args, **kwargs)
    except (WebSocketException, OSError) as e:
        raise StreamError(f"Exec stream broke: {e}") from e


def _write(target: TextIO, data: str) -> None:
    if not data:
        return
    try:
        target.write(data)
        target.flush()
    except OSError as e:
        raise StreamError(f"Failed to write remote output locally: {e}") from e
