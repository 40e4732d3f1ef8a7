"""
Thin wrapper over the Kubernetes API groups the detail resolver reads from.
"""

import os
import logging
from typing import Optional

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from helmbridge.core.errors import ConfigError

logger = logging.getLogger("helmbridge.cluster")


def is_running_in_k8s() -> bool:
    return os.path.isdir("/var/run/secrets/kubernetes.io/")


class ClusterClient(object):

    def __init__(self, config_file: Optional[str] = None, context: Optional[str] = None,
                 timeout: float = 30.0):
        """
        :param config_file: kubeconfig file, defaults to ~/.kube/config
        :param context: kubernetes context
        :param timeout: seconds allowed for each API request
        In-cluster credentials are used when running inside a pod and no
        kubeconfig was named explicitly.
        """
        try:
            if config_file or not is_running_in_k8s():
                logger.debug(f"Loading kubeconfig {config_file or '(default)'}")
                config.load_kube_config(config_file=config_file, context=context)
            else:
                logger.debug("Loading in-cluster configuration")
                config.load_incluster_config()
        except (ConfigException, OSError) as e:
            raise ConfigError(f"Failed to load Kubernetes configuration: {e}")
        self.timeout = timeout
        self.core_api = client.CoreV1Api()
        self.apps_api = client.AppsV1Api()
        self.networking_api = client.NetworkingV1Api()

    def read_pod(self, name, namespace):
        return self.core_api.read_namespaced_pod(name, namespace, _request_timeout=self.timeout)

    def read_service(self, name, namespace):
        return self.core_api.read_namespaced_service(name, namespace, _request_timeout=self.timeout)

    def read_config_map(self, name, namespace):
        return self.core_api.read_namespaced_config_map(name, namespace, _request_timeout=self.timeout)

    def read_secret(self, name, namespace):
        return self.core_api.read_namespaced_secret(name, namespace, _request_timeout=self.timeout)

    def read_ingress(self, name, namespace):
        return self.networking_api.read_namespaced_ingress(name, namespace, _request_timeout=self.timeout)

    def read_deployment(self, name, namespace):
        return self.apps_api.read_namespaced_deployment(name, namespace, _request_timeout=self.timeout)

    def read_stateful_set(self, name, namespace):
        return self.apps_api.read_namespaced_stateful_set(name, namespace, _request_timeout=self.timeout)
