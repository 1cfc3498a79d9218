import pytest

from konjure.resourcemeta import ResourceMetaFilter, matches_selector, set_namespace


def rm_node(name, labels=None, annotations=None):
    metadata = {"name": name}
    if labels:
        metadata["labels"] = labels
    if annotations:
        metadata["annotations"] = annotations
    return {"apiVersion": "invalid.example.com/v1", "kind": "Test", "metadata": metadata}


@pytest.mark.parametrize(
    "flt,inputs,expected",
    [
        (ResourceMetaFilter(), [rm_node("test")], [rm_node("test")]),
        (
            ResourceMetaFilter(name="foo.*"),
            [rm_node("foobar"), rm_node("barfoo")],
            [rm_node("foobar")],
        ),
        (
            ResourceMetaFilter(name="foo.*", invert_match=True),
            [rm_node("foobar"), rm_node("barfoo")],
            [rm_node("barfoo")],
        ),
        (
            ResourceMetaFilter(annotation_selector="test=testing"),
            [rm_node("test"), rm_node("testWithAnnotation", None, {"test": "testing"})],
            [rm_node("testWithAnnotation", None, {"test": "testing"})],
        ),
        (
            ResourceMetaFilter(annotation_selector="test!=testing"),
            [rm_node("test"), rm_node("testWithAnnotation", None, {"test": "testing"})],
            [rm_node("test")],
        ),
    ],
    ids=["match all", "match name", "match name negate", "match annotation", "match annotation negate"],
)
def test_resource_meta_filter(flt, inputs, expected):
    assert flt.filter(inputs) == expected


def test_group_and_version_patterns():
    nodes = [rm_node("a")]
    assert ResourceMetaFilter(group=r"invalid\.example\.com", version="v1").filter(nodes) == nodes
    assert ResourceMetaFilter(version="v2").filter(nodes) == []


def test_patterns_are_anchored():
    assert ResourceMetaFilter(name="foo").filter([rm_node("foobar")]) == []


def test_label_selector_filter():
    nodes = [rm_node("a", {"env": "prod"}), rm_node("b", {"env": "test"})]
    assert ResourceMetaFilter(label_selector="env in (prod,dev)").filter(nodes) == [nodes[0]]


def test_invalid_pattern_raises():
    with pytest.raises(ValueError):
        ResourceMetaFilter(name="(").filter([rm_node("a")])


@pytest.mark.parametrize(
    "selector,expected",
    [
        ("env", True),
        ("!env", False),
        ("env=prod", True),
        ("env==prod", True),
        ("env!=prod", False),
        ("env in (dev, prod)", True),
        ("env notin (dev, prod)", False),
        ("tier", False),
        ("env=prod,tier", False),
        ("", True),
    ],
)
def test_matches_selector(selector, expected):
    assert matches_selector({"env": "prod"}, selector) is expected


def test_matches_selector_invalid():
    with pytest.raises(ValueError):
        matches_selector({"env": "prod"}, "env=prod,")


def test_set_namespace_skips_cluster_scoped():
    namespace = {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": "ns"}}
    result = set_namespace("other")(namespace)
    assert "namespace" not in result["metadata"]


def test_set_namespace_sets_namespaced():
    deployment = {"apiVersion": "apps/v1", "kind": "Deployment", "metadata": {"name": "d"}}
    result = set_namespace("other")(deployment)
    assert result["metadata"]["namespace"] == "other"