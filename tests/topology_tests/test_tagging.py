"""Tests for the common tag policy."""

from ecs_topology.core import EnvConfig, ResourceType, TaggingPolicy, Topology
from ecs_topology.core.tagging import COMMON_TAG_KEYS


def test_common_tags_contain_the_six_keys(config: EnvConfig) -> None:
    tags = TaggingPolicy.from_config(config).common_tags()

    assert tuple(tags) == COMMON_TAG_KEYS
    assert tags["AppName"] == "demo-app"
    assert tags["ManagedBy"] == "terraform"


def test_with_name_returns_a_copy(config: EnvConfig) -> None:
    """Test that naming a tag set leaves the original untouched."""
    policy = TaggingPolicy.from_config(config)
    tags = policy.common_tags("other-app")

    named = TaggingPolicy.with_name(tags, "public-subnet-a")

    assert named["Name"] == "public-subnet-a"
    assert named["AppName"] == "other-app"
    assert "Name" not in tags


def test_every_taggable_node_carries_identical_common_tags(topology: Topology) -> None:
    """Test uniform tagging across the topology."""
    taggable = [node for node in topology.nodes if node.type.taggable]
    assert taggable

    common = {
        key: value for key, value in taggable[0].tags.items() if key in COMMON_TAG_KEYS
    }
    assert set(common) == set(COMMON_TAG_KEYS)
    for node in taggable:
        assert node.tags is not None
        assert {key: node.tags[key] for key in COMMON_TAG_KEYS} == common


def test_untaggable_nodes_carry_no_tags(topology: Topology) -> None:
    untaggable_types = {
        ResourceType.ROUTE,
        ResourceType.ROUTE_TABLE_ASSOCIATION,
        ResourceType.IAM_ROLE_POLICY_ATTACHMENT,
        ResourceType.SECURITY_GROUP_RULE,
    }
    nodes = [node for node in topology.nodes if node.type in untaggable_types]

    assert {node.type for node in nodes} == untaggable_types
    assert all(node.tags is None for node in nodes)
