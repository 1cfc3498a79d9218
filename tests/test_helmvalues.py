import pytest

from konjure.filters import Pipeline, filter_all
from konjure.helmvalues import HelmValues


@pytest.mark.parametrize(
    "values, expected",
    [
        (["foo=bar"], [{"foo": "bar"}]),
        (["a=b", "c=d"], [{"a": "b", "c": "d"}]),
        (["foo[0]=bar"], [{"foo": ["bar"]}]),
    ],
    ids=["single flat set", "multiple flat set", "single nested set"],
)
def test_read(values, expected):
    assert HelmValues(values=values).read() == expected


def test_apply():
    nodes = Pipeline(
        inputs=[HelmValues(values=["a=b"])],
        filters=[filter_all(HelmValues(values=["c.d=e", "a=z"]).apply())],
    ).read()
    assert nodes == [{"a": "z", "c": {"d": "e"}}]


def test_apply_empty_is_identity():
    node = {"a": "b"}
    assert HelmValues().apply()(node) == {"a": "b"}


def test_flatten():
    flattened = Pipeline(
        inputs=[HelmValues(values=["a=b"]), HelmValues(values=["c=d"])],
        filters=[HelmValues().flatten()],
    ).read()
    assert len(flattened) == 1
    assert flattened[0]["a"] == "b"
    assert flattened[0]["c"] == "d"


def test_flatten_rejects_non_mapping():
    with pytest.raises(ValueError):
        HelmValues().flatten()([["x"]])


def test_empty():
    values = HelmValues()
    assert values.empty() is True
    assert values.read() == []
    assert values.as_map() is None
    assert HelmValues(values=["a=b"]).empty() is False


def test_value_files_merge(tmp_path):
    (tmp_path / "one.yaml").write_text("a:\n  b: 1\n  c: 2\n", encoding="utf-8")
    (tmp_path / "two.yaml").write_text("a:\n  c: 3\n", encoding="utf-8")
    values = HelmValues(value_files=["one.yaml", "two.yaml"], fs=tmp_path)
    assert values.as_map() == {"a": {"b": 1, "c": 3}}


def test_set_overrides_value_file(tmp_path):
    (tmp_path / "values.yaml").write_text("a: b\n", encoding="utf-8")
    values = HelmValues(value_files=["values.yaml"], values=["a=z"], fs=tmp_path)
    assert values.as_map() == {"a": "z"}


def test_string_values_stay_strings():
    assert HelmValues(string_values=["n=5"]).as_map() == {"n": "5"}


def test_file_values(tmp_path):
    (tmp_path / "motd.txt").write_text("hello", encoding="utf-8")
    values = HelmValues(file_values=["motd=motd.txt"], fs=tmp_path)
    assert values.as_map() == {"motd": "hello"}


def test_missing_value_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        HelmValues(value_files=["missing.yaml"], fs=tmp_path).as_map()


def test_merge_maps_nested():
    result = HelmValues().merge_maps({"a": {"b": 1, "c": 2}, "x": 1}, {"a": {"c": 3}, "x": {"y": 2}})
    assert result == {"a": {"b": 1, "c": 3}, "x": {"y": 2}}


def test_merge_maps_does_not_modify_inputs():
    a = {"a": {"b": 1}}
    HelmValues().merge_maps(a, {"a": {"c": 2}})
    assert a == {"a": {"b": 1}}


def test_mask_keep():
    nodes = [{"a": 1, "b": {"c": 2, "d": 3}}]
    assert HelmValues(values=["b.c=x"]).mask(True)(nodes) == [{"b": {"c": 2}}]


def test_mask_strip():
    nodes = [{"a": 1, "b": {"c": 2, "d": 3}}]
    assert HelmValues(values=["b.c=x"]).mask(False)(nodes) == [{"a": 1, "b": {"d": 3}}]


def test_mask_drops_unmatched_documents():
    assert HelmValues(values=["b=x"]).mask(True)([{"a": 1}]) == []


def test_mask_without_values_drops_everything():
    assert HelmValues().mask(True)([{"a": 1}]) == []


def test_mask_rejects_non_mapping():
    with pytest.raises(ValueError):
        HelmValues(values=["a=b"]).mask(True)([["x"]])