#!/usr/bin/env python3
"""
HELMBRIDGE DETAIL RESOLVER
--------------------------
Reads the live object behind a ResourceDescriptor and reduces it to the
flat string mapping the Bridge service stores. Each supported kind has
exactly one extractor; anything else is rejected as unsupported.
"""

import logging
from typing import Any, Callable, Dict, Iterable

from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from helmbridge.core.errors import ResolutionError, UnsupportedKindError
from helmbridge.core.models import ResourceDescriptor, ResourceKind

logger = logging.getLogger("helmbridge.resolver")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _count(value: Any) -> str:
    # Status counters are omitted by the API server while they are zero
    return str(value or 0)


def _join_keys(data: Dict[str, Any]) -> str:
    return ",".join((data or {}).keys())


class DetailResolver:
    """
    Dispatches on ResourceKind to one extractor per kind.

    The cluster argument needs the read_* methods of ClusterClient; tests
    hand in a MagicMock.
    """

    def __init__(self, cluster):
        self.cluster = cluster
        self._extractors: Dict[ResourceKind, Callable[[ResourceDescriptor], Dict[str, str]]] = {
            ResourceKind.POD: self._pod,
            ResourceKind.SERVICE: self._service,
            ResourceKind.INGRESS: self._ingress,
            ResourceKind.DEPLOYMENT: self._deployment,
            ResourceKind.STATEFULSET: self._stateful_set,
            ResourceKind.CONFIGMAP: self._config_map,
            ResourceKind.SECRET: self._secret,
        }

    def supports(self, kind: str) -> bool:
        return ResourceKind.lookup(kind) is not None

    def resolve(self, descriptor: ResourceDescriptor) -> Dict[str, str]:
        kind = ResourceKind.lookup(descriptor.kind)
        if kind is None:
            raise UnsupportedKindError(
                f"Unsupported resource type: {descriptor.kind}", identity=descriptor.identity
            )
        details = self._extractors[kind](descriptor)
        logger.debug(f"Resolved {descriptor.identity}: {details}")
        return details

    def _read(self, reader: Callable[[str, str], Any], descriptor: ResourceDescriptor) -> Any:
        try:
            return reader(descriptor.name, descriptor.namespace)
        except ApiException as e:
            raise ResolutionError(
                f"Failed to get {descriptor.kind} details for "
                f"{descriptor.namespace}/{descriptor.name}: {e.status} {e.reason}",
                identity=descriptor.identity,
            )
        except HTTPError as e:
            raise ResolutionError(
                f"Failed to get {descriptor.kind} details for "
                f"{descriptor.namespace}/{descriptor.name}: {e}",
                identity=descriptor.identity,
            )

    def _pod(self, descriptor: ResourceDescriptor) -> Dict[str, str]:
        pod = self._read(self.cluster.read_pod, descriptor)
        return {
            "namespace": descriptor.namespace,
            "podIP": _text(pod.status.pod_ip if pod.status else None),
            "nodeName": _text(pod.spec.node_name if pod.spec else None),
        }

    def _service(self, descriptor: ResourceDescriptor) -> Dict[str, str]:
        service = self._read(self.cluster.read_service, descriptor)
        return {
            "namespace": descriptor.namespace,
            "clusterIP": _text(service.spec.cluster_ip),
            "ports": ",".join(self._service_ports(service.spec.ports or [])),
        }

    @staticmethod
    def _service_ports(ports: Iterable[Any]) -> Iterable[str]:
        return [f"{port.port}/{_text(port.protocol)}" for port in ports]

    def _ingress(self, descriptor: ResourceDescriptor) -> Dict[str, str]:
        ingress = self._read(self.cluster.read_ingress, descriptor)
        rules = ingress.spec.rules if ingress.spec else None
        if not rules:
            raise ResolutionError(
                f"Ingress {descriptor.namespace}/{descriptor.name} has no rules",
                identity=descriptor.identity,
            )
        return {
            "namespace": descriptor.namespace,
            "host": _text(rules[0].host),
        }

    def _deployment(self, descriptor: ResourceDescriptor) -> Dict[str, str]:
        deployment = self._read(self.cluster.read_deployment, descriptor)
        status = deployment.status
        return {
            "namespace": descriptor.namespace,
            "replicas": _count(deployment.spec.replicas),
            "availableReplicas": _count(status.available_replicas if status else None),
            "updatedReplicas": _count(status.updated_replicas if status else None),
        }

    def _stateful_set(self, descriptor: ResourceDescriptor) -> Dict[str, str]:
        stateful_set = self._read(self.cluster.read_stateful_set, descriptor)
        status = stateful_set.status
        return {
            "namespace": descriptor.namespace,
            "replicas": _count(stateful_set.spec.replicas),
            "readyReplicas": _count(status.ready_replicas if status else None),
            "currentReplicas": _count(status.current_replicas if status else None),
        }

    def _config_map(self, descriptor: ResourceDescriptor) -> Dict[str, str]:
        config_map = self._read(self.cluster.read_config_map, descriptor)
        return {
            "namespace": descriptor.namespace,
            "dataKeys": _join_keys(config_map.data),
        }

    def _secret(self, descriptor: ResourceDescriptor) -> Dict[str, str]:
        secret = self._read(self.cluster.read_secret, descriptor)
        return {
            "namespace": descriptor.namespace,
            "dataKeys": _join_keys(secret.data),
            "type": _text(secret.type),
        }
