"""Kubernetes cluster session.

This module provides the ClusterSession class, which authenticates
against a cluster once per invocation and pins the namespace that every
later list and exec call is scoped to.
"""

from pathlib import Path

import yaml
from icecream import ic
from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from kube_pod_exec.exceptions import ConfigurationError

DEFAULT_NAMESPACE = "default"
IN_CLUSTER_CONTEXT = "in-cluster"
SERVICE_ACCOUNT_NAMESPACE_PATH = Path("/var/run/secrets/kubernetes.io/serviceaccount/namespace")


class ClusterSession:
    """Authenticated handle bound to a single namespace.

    The session is built from a kubeconfig file when one is given or the
    default one exists, and from the pod's service account otherwise.
    Nothing is mutated after construction.

    Attributes:
        context: The kubeconfig context name, or "in-cluster".
        namespace: The namespace all pod operations are scoped to.
        api_client: The isolated ApiClient carrying credentials.
        core_v1: CoreV1Api bound to api_client.

    """

    def __init__(self, kubeconfig: str | None = None) -> None:
        """Initialize the session from a kubeconfig or in-cluster configuration.

        Args:
            kubeconfig: Path to a kubeconfig file. When None, the default
                        ~/.kube/config is used if present, otherwise the
                        in-cluster service account.

        Raises:
            ConfigurationError: If the configuration cannot be located or
                parsed, or the client cannot be constructed.

        """
        config_file = kubeconfig or self._default_kubeconfig()
        if config_file is not None:
            self.context, self.namespace = self._resolve_context(config_file)
            self.api_client: client.ApiClient = self._client_from_kubeconfig(config_file)
        else:
            self.context = IN_CLUSTER_CONTEXT
            self.api_client = self._client_from_service_account()
            self.namespace = self._service_account_namespace()
        self.core_v1: client.CoreV1Api = client.CoreV1Api(self.api_client)
        ic(self)

    @staticmethod
    def _default_kubeconfig() -> str | None:
        path = Path.home() / ".kube" / "config"
        return str(path) if path.is_file() else None

    @staticmethod
    def _resolve_context(config_file: str) -> tuple[str, str]:
        """Read the current context name and its namespace.

        Args:
            config_file: Path to the kubeconfig file.

        Returns:
            Tuple of (context name, namespace). The namespace defaults to
            "default" when the context does not set one.

        Raises:
            ConfigurationError: If the kubeconfig is invalid or missing.

        """
        try:
            _, current_context = config.list_kube_config_contexts(config_file=config_file)
        except (ConfigException, OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid or missing kubeconfig: {e}") from e

        if not current_context:
            raise ConfigurationError(f"No current context set in kubeconfig {config_file}")

        context_name = str(current_context["name"])
        namespace = (current_context.get("context") or {}).get("namespace") or DEFAULT_NAMESPACE
        return context_name, namespace

    @staticmethod
    def _client_from_kubeconfig(config_file: str) -> client.ApiClient:
        try:
            return config.new_client_from_config(config_file=config_file)
        except (ConfigException, OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to build client from kubeconfig: {e}") from e

    @staticmethod
    def _client_from_service_account() -> client.ApiClient:
        configuration = client.Configuration()
        try:
            config.load_incluster_config(client_configuration=configuration)
        except ConfigException as e:
            raise ConfigurationError(f"No kubeconfig found and not running in a cluster: {e}") from e
        return client.ApiClient(configuration)

    @staticmethod
    def _service_account_namespace() -> str:
        try:
            namespace = SERVICE_ACCOUNT_NAMESPACE_PATH.read_text().strip()
        except OSError:
            return DEFAULT_NAMESPACE
        return namespace or DEFAULT_NAMESPACE

    def close(self) -> None:
        """Release the connection pool held by the API client."""
        self.api_client.close()

    def __enter__(self) -> "ClusterSession":
        """Enter context manager.

        Returns:
            The ClusterSession instance.

        """
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        """Exit context manager and release the client.

        Args:
            exc_type: Exception type if an exception was raised.
            exc_val: Exception value if an exception was raised.
            exc_tb: Exception traceback if an exception was raised.

        """
        self.close()

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"ClusterSession(context={self.context!r}, namespace={self.namespace!r})"
