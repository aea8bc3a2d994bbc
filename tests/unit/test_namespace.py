import pytest
from kubernetes import client

from consensus_k8s.errors import AlreadyExistsError, InfrastructureError, MalformedResponseError
from consensus_k8s.namespace import NamespaceProvisioner, ensure_namespace

from fake_platform import FakePlatform


def creates(platform):
    return [call for call in platform.calls if call[0] == "create_namespace"]


def test_creates_missing_namespace_with_label():
    platform = FakePlatform()

    assert ensure_namespace(platform, "consensus") == "consensus"

    created = platform.namespaces["consensus"]
    assert created.metadata.labels == {"name": "consensus"}
    assert creates(platform) == [("create_namespace", "consensus")]


def test_second_call_reuses_namespace():
    platform = FakePlatform()
    provisioner = NamespaceProvisioner(platform)

    provisioner.ensure("consensus")
    provisioner.ensure("consensus")

    assert len(creates(platform)) == 1


def test_conflict_on_create_is_tolerated():
    class RacingPlatform(FakePlatform):
        def get_namespace(self, name):
            self.calls.append(("get_namespace", name))
            # The first lookup misses; a concurrent creator wins meanwhile.
            if len(self.calls) == 1:
                return None
            return client.V1Namespace(metadata=client.V1ObjectMeta(name=name))

        def create_namespace(self, body):
            self.calls.append(("create_namespace", body.metadata.name))
            raise AlreadyExistsError(body.metadata.name)

    platform = RacingPlatform()

    assert NamespaceProvisioner(platform).ensure("consensus") == "consensus"
    assert platform.calls == [
        ("get_namespace", "consensus"),
        ("create_namespace", "consensus"),
        ("get_namespace", "consensus"),
    ]


def test_existing_namespace_without_name_is_malformed():
    platform = FakePlatform()
    platform.namespaces["consensus"] = client.V1Namespace(metadata=client.V1ObjectMeta())

    with pytest.raises(MalformedResponseError):
        ensure_namespace(platform, "consensus")


def test_empty_name_is_rejected():
    with pytest.raises(ValueError):
        ensure_namespace(FakePlatform(), "")


def test_created_namespace_without_name_is_malformed():
    class NamelessPlatform(FakePlatform):
        def create_namespace(self, body):
            self.calls.append(("create_namespace", body.metadata.name))
            return client.V1Namespace(metadata=client.V1ObjectMeta())

    with pytest.raises(MalformedResponseError):
        ensure_namespace(NamelessPlatform(), "consensus")


def test_lookup_failure_reaches_caller():
    class UnreachablePlatform(FakePlatform):
        def get_namespace(self, name):
            self.calls.append(("get_namespace", name))
            raise InfrastructureError("connection refused")

    platform = UnreachablePlatform()

    with pytest.raises(InfrastructureError):
        NamespaceProvisioner(platform).ensure("consensus")
    assert creates(platform) == []
