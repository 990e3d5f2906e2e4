"""Custom exceptions for kube-pod-exec.

This module defines the exception hierarchy used throughout the application.
Every failure of a single invocation maps to exactly one of these classes,
and the CLI decides the process exit code from the class alone.
"""


class PodExecError(Exception):
    """Base exception for all kube-pod-exec errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch all kube-pod-exec errors with a single
    except clause if desired.
    """

    pass


class ConfigurationError(PodExecError):
    """Raised when a cluster session cannot be established.

    This can occur when:
    - The kubeconfig cannot be located or parsed
    - The current context is missing or incomplete
    - No kubeconfig exists and the process is not running inside a cluster
    """

    pass


class ListError(PodExecError):
    """Raised when listing pods in the cluster fails.

    This can occur when:
    - The cluster is unreachable
    - Authentication or authorization is rejected
    - The namespace does not exist
    """

    pass


class NotFoundError(PodExecError):
    """Raised when the label filter matches no pod in the Running phase.

    The list call itself succeeded; the cluster simply has no eligible
    target for the command.
    """

    pass


class StreamError(PodExecError):
    """Raised when the exec channel cannot be opened or breaks mid-transfer.

    This can occur when:
    - The pod or container does not exist
    - The exec protocol handshake fails
    - The connection drops before the remote process reports its status
    """

    pass


class StreamTimeoutError(StreamError):
    """Raised when the exec channel is abandoned before the remote process exits.

    Either the configured timeout expired or the caller signalled
    cancellation.
    """

    pass


class RemoteExitError(PodExecError):
    """Raised when the remote command ran to completion with a non-zero status.

    Attributes:
        status: The exit status reported by the remote process.

    """

    def __init__(self, status: int) -> None:
        """Initialize with the remote exit status.

        Args:
            status: The non-zero exit status of the remote command.

        """
        super().__init__(f"command terminated with non-zero exit code: {status}")
        self.status: int = status
