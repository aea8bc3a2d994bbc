import pytest

from consensus_k8s.config import NODES_PORT, NodeAddr
from consensus_k8s.deployment import build_deployment, deploy_node, node_name
from consensus_k8s.errors import MalformedResponseError
from consensus_k8s.peers import decode_peer_args, encode_peer_args

from fake_platform import FakePlatform


PEERS = [NodeAddr(id="consensus-node-00", address="10.0.0.1:3154")]


def container_of(deployment):
    containers = deployment.spec.template.spec.containers
    assert len(containers) == 1
    return containers[0]


def test_node_name_is_zero_padded():
    assert node_name(0) == "consensus-node-00"
    assert node_name(7) == "consensus-node-07"
    assert node_name(42) == "consensus-node-42"


def test_node_names_are_unique_in_supported_range():
    names = {node_name(i) for i in range(100)}

    assert len(names) == 100


@pytest.mark.parametrize("index", [-1, 100, 250])
def test_node_name_rejects_out_of_range_index(index):
    with pytest.raises(ValueError):
        node_name(index)


def test_regular_node_deployment():
    deployment = build_deployment(3, False, PEERS, "ns1")

    assert deployment.metadata.name == "consensus-node-03"
    assert deployment.metadata.namespace == "ns1"
    assert deployment.spec.replicas == 1
    assert deployment.spec.template.metadata.labels == {
        "app": "consensus-node-03",
        "id": "consensus-node-03",
        "seed": "false",
    }
    assert deployment.spec.selector.match_labels == {"app": "consensus-node-03"}

    container = container_of(deployment)
    assert container.args == ["--add-gossip-static-outbound", encode_peer_args(PEERS)[1]]
    assert decode_peer_args(container.args) == PEERS

    for probe in (container.liveness_probe, container.readiness_probe):
        assert probe.http_get.path == "/health"
        assert probe.http_get.port == 3154


def test_seed_node_deployment_has_no_peer_args():
    deployment = build_deployment(0, True, [], "ns1")

    assert deployment.spec.template.metadata.labels["seed"] == "true"
    assert container_of(deployment).args == []


def test_container_spec():
    container = container_of(build_deployment(1, True, [], "ns1"))

    assert container.name == "consensus-node-01"
    assert container.image == "consensus-node"
    assert container.image_pull_policy == "Never"
    assert container.command == ["./k8s_entrypoint.sh"]
    assert [p.container_port for p in container.ports] == [NODES_PORT, 3154]

    env = {var.name: var for var in container.env}
    assert env["NODE_ID"].value == "consensus-node-01"
    assert env["PUBLIC_ADDR"].value is None
    assert env["PUBLIC_ADDR"].value_from.field_ref.field_path == "status.podIP"


def test_overrides_are_applied():
    deployment = build_deployment(
        2, True, [], "ns1", node_port=4000, image="registry/node:dev", image_pull_policy="Always"
    )

    container = container_of(deployment)
    assert container.image == "registry/node:dev"
    assert container.image_pull_policy == "Always"
    assert container.ports[0].container_port == 4000


def test_deploy_node_submits_deployment():
    platform = FakePlatform()

    name = deploy_node(platform, 5, False, PEERS, "ns1")

    assert name == "consensus-node-05"
    assert platform.calls == [("create_deployment", "consensus-node-05")]


def test_deploy_node_rejects_nameless_response():
    class NamelessPlatform(FakePlatform):
        def create_deployment(self, namespace, body):
            body.metadata.name = None
            return body

    with pytest.raises(MalformedResponseError):
        deploy_node(NamelessPlatform(), 0, True, [], "ns1")


def test_deploy_node_reuses_existing_deployment():
    platform = FakePlatform()

    deploy_node(platform, 1, True, [], "ns1")
    name = deploy_node(platform, 1, True, [], "ns1")

    assert name == "consensus-node-01"
    assert len(platform.deployments) == 1
