"""Shared test fixtures for kube-pod-exec tests."""

import io
import time
from unittest.mock import MagicMock, patch

import pytest
from kubernetes.stream.ws_client import ERROR_CHANNEL

SUCCESS_STATUS = '{"metadata":{},"status":"Success"}'


def exit_status(code: int) -> str:
    """Build the Status payload the API server sends for a non-zero exit."""
    return (
        '{"metadata":{},"status":"Failure",'
        f'"message":"command terminated with non-zero exit code: exit code {code}",'
        '"reason":"NonZeroExitCode",'
        f'"details":{{"causes":[{{"reason":"ExitCode","message":"{code}"}}]}}}}'
    )


class FakeExecStream:
    """Stand-in for kubernetes.stream.ws_client.WSClient.

    Each call to update() delivers the next (stdout, stderr) frame pair;
    the channel closes once all frames are delivered unless hang is set.
    closing_frame is delivered by the same update() that closes the channel.
    Like the real client, every output frame is also written to _all.
    """

    def __init__(self, frames=(), status=SUCCESS_STATUS, hang=False, error=None, closing_frame=None):
        self._frames = list(frames)
        self._closing_frame = closing_frame
        self._all = io.StringIO()
        self._status = status
        self._hang = hang
        self._error = error
        self._stdout = ""
        self._stderr = ""
        self.closed = False
        self.updates = 0

    def is_open(self):
        return not self.closed and (self._hang or bool(self._frames) or self._closing_frame is not None)

    def update(self, timeout=0):
        self.updates += 1
        if self._error is not None:
            raise self._error
        if self._frames:
            self._buffer(*self._frames.pop(0))
        elif self._closing_frame is not None:
            self._buffer(*self._closing_frame)
            self._closing_frame = None
        elif self._hang:
            time.sleep(0.001)

    def _buffer(self, out, err):
        self._stdout += out
        self._stderr += err
        self._all.write(out + err)

    def read_stdout(self, timeout=0):
        out, self._stdout = self._stdout, ""
        return out

    def read_stderr(self, timeout=0):
        err, self._stderr = self._stderr, ""
        return err

    def read_channel(self, channel, timeout=0):
        if channel == ERROR_CHANNEL:
            return self._status
        return ""

    def close(self):
        self.closed = True


def _make_pod(name, phase="Running", namespace="default", containers=("app",)):
    pod = MagicMock()
    pod.metadata.name = name
    pod.metadata.namespace = namespace
    pod.status.phase = phase
    spec_containers = []
    for container_name in containers:
        container = MagicMock()
        container.name = container_name
        spec_containers.append(container)
    pod.spec.containers = spec_containers
    return pod


@pytest.fixture
def mock_kube_contexts():
    """Mock kubernetes config contexts."""
    with patch("kubernetes.config.list_kube_config_contexts") as mock:
        mock.return_value = (
            [{"name": "test-context", "context": {"cluster": "test", "user": "test", "namespace": "team-a"}}],
            {"name": "test-context", "context": {"cluster": "test", "user": "test", "namespace": "team-a"}},
        )
        yield mock


@pytest.fixture
def mock_new_client():
    """Mock isolated ApiClient construction from a kubeconfig."""
    with patch("kubernetes.config.new_client_from_config") as mock:
        mock.return_value = MagicMock()
        yield mock


@pytest.fixture
def mock_core_v1_api():
    """Mock CoreV1Api construction."""
    with patch("kubernetes.client.CoreV1Api") as mock:
        api_instance = MagicMock()
        mock.return_value = api_instance
        yield mock


@pytest.fixture
def session_mocks(mock_kube_contexts, mock_new_client, mock_core_v1_api):
    """Combined fixture for creating a ClusterSession from a kubeconfig."""
    return {
        "contexts": mock_kube_contexts,
        "new_client": mock_new_client,
        "core_api": mock_core_v1_api,
    }


@pytest.fixture
def session():
    """A ClusterSession stand-in bound to the default namespace."""
    fake = MagicMock()
    fake.context = "test-context"
    fake.namespace = "default"
    fake.core_v1.list_namespaced_pod.return_value.items = []
    return fake


@pytest.fixture
def mock_stream():
    """Mock the kubernetes exec stream factory used by the streamer."""
    with patch("kube_pod_exec.streamer.stream") as mock:
        mock.return_value = FakeExecStream()
        yield mock


@pytest.fixture
def make_pod():
    """Factory for MagicMocks shaped like kubernetes.client.V1Pod."""
    return _make_pod


@pytest.fixture
def exec_stream():
    """The FakeExecStream class, for building scripted exec channels."""
    return FakeExecStream


@pytest.fixture
def exit_status_payload():
    """Factory for the Status payload of a non-zero remote exit."""
    return exit_status
