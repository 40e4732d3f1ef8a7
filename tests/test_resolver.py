import pytest
from unittest.mock import MagicMock
from kubernetes import client
from kubernetes.client.rest import ApiException
from urllib3.exceptions import ProtocolError

from helmbridge.cluster.resolver import DetailResolver
from helmbridge.core.errors import ResolutionError, UnsupportedKindError
from helmbridge.core.models import ResourceDescriptor


def descriptor(kind, name="app", namespace="prod"):
    return ResourceDescriptor(kind=kind, name=name, namespace=namespace, register_flag=True)


@pytest.fixture
def cluster():
    return MagicMock()


def test_pod_details(cluster):
    cluster.read_pod.return_value = client.V1Pod(
        spec=client.V1PodSpec(node_name="node-a", containers=[]),
        status=client.V1PodStatus(pod_ip="10.1.2.3"),
    )

    details = DetailResolver(cluster).resolve(descriptor("Pod"))

    cluster.read_pod.assert_called_once_with("app", "prod")
    assert details == {"namespace": "prod", "podIP": "10.1.2.3", "nodeName": "node-a"}


def test_service_details_join_ports(cluster):
    cluster.read_service.return_value = client.V1Service(
        spec=client.V1ServiceSpec(
            cluster_ip="10.96.0.10",
            ports=[
                client.V1ServicePort(port=80, protocol="TCP"),
                client.V1ServicePort(port=53, protocol="UDP"),
            ],
        )
    )

    details = DetailResolver(cluster).resolve(descriptor("Service"))

    assert details == {"namespace": "prod", "clusterIP": "10.96.0.10", "ports": "80/TCP,53/UDP"}


def test_ingress_uses_first_rule_host(cluster):
    cluster.read_ingress.return_value = client.V1Ingress(
        spec=client.V1IngressSpec(rules=[
            client.V1IngressRule(host="app.example.com"),
            client.V1IngressRule(host="other.example.com"),
        ])
    )

    details = DetailResolver(cluster).resolve(descriptor("Ingress"))

    assert details == {"namespace": "prod", "host": "app.example.com"}


def test_ingress_without_rules_is_an_error(cluster):
    cluster.read_ingress.return_value = client.V1Ingress(spec=client.V1IngressSpec(rules=[]))

    with pytest.raises(ResolutionError, match="has no rules"):
        DetailResolver(cluster).resolve(descriptor("Ingress"))


def test_deployment_details(cluster):
    cluster.read_deployment.return_value = client.V1Deployment(
        spec=client.V1DeploymentSpec(
            replicas=3,
            selector=client.V1LabelSelector(),
            template=client.V1PodTemplateSpec(),
        ),
        status=client.V1DeploymentStatus(available_replicas=2, updated_replicas=3),
    )

    details = DetailResolver(cluster).resolve(descriptor("Deployment"))

    assert details == {
        "namespace": "prod",
        "replicas": "3",
        "availableReplicas": "2",
        "updatedReplicas": "3",
    }


def test_statefulset_unset_counters_render_as_zero(cluster):
    cluster.read_stateful_set.return_value = client.V1StatefulSet(
        spec=client.V1StatefulSetSpec(
            replicas=2,
            service_name="db",
            selector=client.V1LabelSelector(),
            template=client.V1PodTemplateSpec(),
        ),
        status=client.V1StatefulSetStatus(replicas=2, current_replicas=2),
    )

    details = DetailResolver(cluster).resolve(descriptor("StatefulSet"))

    assert details == {
        "namespace": "prod",
        "replicas": "2",
        "readyReplicas": "0",
        "currentReplicas": "2",
    }


def test_configmap_data_keys(cluster):
    cluster.read_config_map.return_value = client.V1ConfigMap(data={"a.conf": "x", "b.conf": "y"})

    details = DetailResolver(cluster).resolve(descriptor("ConfigMap"))

    assert details["namespace"] == "prod"
    assert sorted(details["dataKeys"].split(",")) == ["a.conf", "b.conf"]


def test_configmap_without_data(cluster):
    cluster.read_config_map.return_value = client.V1ConfigMap()

    details = DetailResolver(cluster).resolve(descriptor("ConfigMap"))

    assert details == {"namespace": "prod", "dataKeys": ""}


def test_secret_details(cluster):
    cluster.read_secret.return_value = client.V1Secret(
        data={"username": "YWRtaW4=", "password": "cGFzcw=="}, type="Opaque"
    )

    details = DetailResolver(cluster).resolve(descriptor("Secret"))

    assert details["type"] == "Opaque"
    assert sorted(details["dataKeys"].split(",")) == ["password", "username"]


def test_unsupported_kind(cluster):
    resolver = DetailResolver(cluster)

    with pytest.raises(UnsupportedKindError, match="CronJob"):
        resolver.resolve(descriptor("CronJob"))
    assert not resolver.supports("CronJob")
    assert cluster.method_calls == []


def test_not_found_becomes_resolution_error(cluster):
    cluster.read_pod.side_effect = ApiException(status=404, reason="Not Found")

    with pytest.raises(ResolutionError) as exc:
        DetailResolver(cluster).resolve(descriptor("Pod", name="ghost"))

    assert "prod/ghost" in str(exc.value)
    assert "404" in str(exc.value)
    assert exc.value.identity == "Pod prod/ghost"


def test_transport_error_becomes_resolution_error(cluster):
    cluster.read_service.side_effect = ProtocolError("Connection aborted")

    with pytest.raises(ResolutionError, match="Connection aborted"):
        DetailResolver(cluster).resolve(descriptor("Service"))


def test_failure_does_not_poison_later_lookups(cluster):
    cluster.read_pod.side_effect = [
        ApiException(status=404, reason="Not Found"),
        client.V1Pod(status=client.V1PodStatus(pod_ip="10.0.0.9")),
    ]
    resolver = DetailResolver(cluster)

    with pytest.raises(ResolutionError):
        resolver.resolve(descriptor("Pod", name="first"))
    details = resolver.resolve(descriptor("Pod", name="second"))

    assert details == {"namespace": "prod", "podIP": "10.0.0.9", "nodeName": ""}
