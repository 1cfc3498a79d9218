import pytest
import yaml

from konjure.fileio import PATH_ANNOTATION, FileReader, FileWriter

DOCS = [
    {"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "a"}},
    {"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "b"}},
]


def test_round_trip(tmp_path):
    target = tmp_path / "out.yaml"
    FileWriter(str(target)).write(DOCS)
    read = FileReader(str(target)).read()
    assert [d["metadata"]["name"] for d in read] == ["a", "b"]


def test_reader_annotates_path(tmp_path):
    target = tmp_path / "out.yaml"
    FileWriter(str(target)).write(DOCS)
    read = FileReader(str(target)).read()
    assert all(d["metadata"]["annotations"][PATH_ANNOTATION] == str(target) for d in read)


def test_writer_drops_reader_annotations(tmp_path):
    source = tmp_path / "in.yaml"
    FileWriter(str(source)).write(DOCS)
    target = tmp_path / "out.yaml"
    FileWriter(str(target)).write(FileReader(str(source)).read())
    assert list(yaml.safe_load_all(target.read_text(encoding="utf-8"))) == DOCS


def test_writer_does_not_modify_nodes(tmp_path):
    source = tmp_path / "in.yaml"
    FileWriter(str(source)).write(DOCS)
    nodes = FileReader(str(source)).read()
    FileWriter(str(tmp_path / "out.yaml")).write(nodes)
    assert PATH_ANNOTATION in nodes[0]["metadata"]["annotations"]


def test_reader_relative_to_fs(tmp_path):
    FileWriter(str(tmp_path / "x.yaml")).write(DOCS[:1])
    read = FileReader("x.yaml", fs=tmp_path).read()
    assert read[0]["metadata"]["annotations"][PATH_ANNOTATION] == "x.yaml"
    assert read[0]["kind"] == "ConfigMap"


def test_writer_mkdir_all(tmp_path):
    target = tmp_path / "deep" / "er" / "out.yaml"
    FileWriter(str(target), mkdir_all_perm=0o700).write(DOCS)
    assert list(yaml.safe_load_all(target.read_text(encoding="utf-8"))) == DOCS


def test_writer_without_mkdir_fails(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileWriter(str(tmp_path / "missing" / "out.yaml")).write(DOCS)


def test_reader_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileReader(str(tmp_path / "missing.yaml")).read()