from unittest.mock import MagicMock

import pytest
from kubernetes import client
from kubernetes.client.rest import ApiException
from urllib3.exceptions import MaxRetryError

from consensus_k8s.deployment import build_deployment
from consensus_k8s.errors import AlreadyExistsError, InfrastructureError
from consensus_k8s.namespace import namespace_manifest
from consensus_k8s.platform import KubernetesPlatform, load_kube_client
from consensus_k8s.platform import kube


def build_platform():
    core = MagicMock()
    apps = MagicMock()
    return KubernetesPlatform(core_api=core, apps_api=apps), core, apps


def test_get_namespace_returns_none_when_missing():
    platform, core, _ = build_platform()
    core.read_namespace.side_effect = ApiException(status=404, reason="Not Found")

    assert platform.get_namespace("consensus") is None


def test_get_namespace_wraps_other_api_errors():
    platform, core, _ = build_platform()
    core.read_namespace.side_effect = ApiException(status=403, reason="Forbidden")

    with pytest.raises(InfrastructureError) as excinfo:
        platform.get_namespace("consensus")
    assert not isinstance(excinfo.value, AlreadyExistsError)


def test_create_namespace_conflict():
    platform, core, _ = build_platform()
    core.create_namespace.side_effect = ApiException(status=409, reason="Conflict")

    with pytest.raises(AlreadyExistsError):
        platform.create_namespace(namespace_manifest("consensus"))


def test_create_deployment_passes_namespace_and_body():
    platform, _, apps = build_platform()
    deployment = build_deployment(0, True, [], "consensus")
    apps.create_namespaced_deployment.return_value = deployment

    assert platform.create_deployment("consensus", deployment) is deployment
    apps.create_namespaced_deployment.assert_called_once_with("consensus", deployment)


def test_list_pods_uses_label_selector():
    platform, core, _ = build_platform()
    pod = client.V1Pod(metadata=client.V1ObjectMeta(name="consensus-node-00-x"))
    core.list_namespaced_pod.return_value = client.V1PodList(items=[pod])

    assert platform.list_pods("consensus", "seed=true") == [pod]
    core.list_namespaced_pod.assert_called_once_with("consensus", label_selector="seed=true")


def test_connection_errors_become_infrastructure_errors():
    platform, core, _ = build_platform()
    core.list_namespaced_pod.side_effect = MaxRetryError(None, "/api/v1/pods")

    with pytest.raises(InfrastructureError):
        platform.list_pods("consensus", "seed=true")


def test_load_kube_client_falls_back_to_kubeconfig(monkeypatch):
    loaded = []

    def no_cluster():
        raise kube.kube_config.ConfigException("not in cluster")

    monkeypatch.setattr(kube.kube_config, "load_incluster_config", no_cluster)
    monkeypatch.setattr(
        kube.kube_config,
        "load_kube_config",
        lambda config_file=None, context=None: loaded.append((config_file, context)),
    )

    assert isinstance(load_kube_client(), client.ApiClient)
    assert loaded == [(None, None)]


def test_load_kube_client_reports_missing_config(monkeypatch):
    def broken(config_file=None, context=None):
        raise kube.kube_config.ConfigException("no configuration found")

    monkeypatch.setattr(kube.kube_config, "load_kube_config", broken)

    with pytest.raises(InfrastructureError):
        load_kube_client("/nonexistent/kubeconfig", "kind")
