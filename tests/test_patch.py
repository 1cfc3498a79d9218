import pytest

from konjure.patch import PatchFilter, UnsupportedPatchError, apply_json_patch


def document():
    return {"a": "x", "b": {"c": "y"}, "items": ["p", "q"]}


@pytest.mark.parametrize("patch_type", ["", "merge", "strategic", "application/merge-patch+json"])
def test_merge_patch_updates_nested_field(patch_type):
    result = PatchFilter(patch_type, b'{"b": {"c": "z"}}').filter(document())
    assert result["b"]["c"] == "z"
    assert result["a"] == document()["a"]


def test_merge_patch_null_removes_field():
    result = PatchFilter("merge", "a: null").filter(document())
    assert "a" not in result
    assert result["b"] == document()["b"]


def test_empty_merge_patch_raises():
    with pytest.raises(ValueError):
        PatchFilter("merge", b"").filter(document())


def test_json_patch_add():
    result = PatchFilter("json", b'[{"op": "add", "path": "/d", "value": "w"}]').filter(document())
    assert result["d"] == "w"


def test_json_patch_from_yaml():
    result = PatchFilter("application/json-patch+json", "- op: remove\n  path: /a\n").filter(document())
    assert "a" not in result


def test_unsupported_patch_type():
    with pytest.raises(UnsupportedPatchError) as info:
        PatchFilter("bogus", b"{}").filter(document())
    assert str(info.value) == 'unsupported patch type: "bogus"'
    assert info.value.patch_type == "bogus"


def test_apply_json_patch_leaves_original_untouched():
    original = document()
    result = apply_json_patch(original, [{"op": "replace", "path": "/a", "value": "v"}])
    assert result["a"] == "v"
    assert original == document()


def test_apply_json_patch_list_insert_and_append():
    result = apply_json_patch(
        document(),
        [
            {"op": "add", "path": "/items/0", "value": "first"},
            {"op": "add", "path": "/items/-", "value": "last"},
        ],
    )
    assert result["items"] == ["first", "p", "q", "last"]


def test_apply_json_patch_move_and_copy():
    result = apply_json_patch(
        document(),
        [
            {"op": "copy", "from": "/a", "path": "/b/copied"},
            {"op": "move", "from": "/b/c", "path": "/moved"},
        ],
    )
    assert result["b"] == {"copied": "x"}
    assert result["moved"] == "y"


def test_apply_json_patch_escaped_pointer():
    result = apply_json_patch({"a/b": 1}, [{"op": "remove", "path": "/a~1b"}])
    assert result == {}


def test_apply_json_patch_test_failure():
    with pytest.raises(ValueError):
        apply_json_patch(document(), [{"op": "test", "path": "/a", "value": "nope"}])


def test_apply_json_patch_test_success_keeps_document():
    assert apply_json_patch(document(), [{"op": "test", "path": "/a", "value": "x"}]) == document()


def test_apply_json_patch_missing_path():
    with pytest.raises(ValueError):
        apply_json_patch(document(), [{"op": "remove", "path": "/missing"}])


def test_apply_json_patch_requires_list():
    with pytest.raises(ValueError):
        apply_json_patch(document(), {"op": "add"})