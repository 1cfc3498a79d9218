# konjure

Building blocks for working with streams of Kubernetes resource documents.
Documents are plain Python data (dictionaries, lists and scalars) as loaded
from YAML. The package reads them from files, processes, templates or Python
values, filters and reshapes them, and writes them back to files or to other
processes.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Modules

- `konjure.strvals`: parses Helm style `--set` lines such as
  `name=value,list={a,b},nested.key=1` into nested dictionaries and lists
  (`parse`, `parse_string`, `parse_into`, `parse_into_string`, `parse_file`,
  `parse_into_file`, `parse_json`, `to_yaml`). Malformed lines raise
  `StrvalsError`.
- `konjure.nodes`: reading and dumping multi-document YAML
  (`read_documents`, `dump_documents`), resource metadata (`ResourceMeta`,
  `get_meta`), path lookups (`lookup`), merging (`merge`) and annotation
  clean-up (`clear_annotation`, `clear_empty_annotations`).
- `konjure.filters`: a `Pipeline` of readers, list filters and writers, plus
  helpers for composing filters (`filter_one`, `filter_all`, `has`, `when`,
  `flatten`, `pipe_one`).
- `konjure.fieldpath`: field paths with `{.key}` placeholders and
  `path=value` specifications (`smarter_path_split`, `field_path`,
  `set_path`, `set_values`, `split_path_value`).
- `konjure.order`: sorting documents into install or uninstall order
  (`install_order`, `uninstall_order`, `sort_by_kind`).
- `konjure.resourcemeta`: keeping or dropping documents by group, version,
  kind, namespace, name, label selector or annotation selector
  (`ResourceMetaFilter`, `matches_selector`), and `set_namespace`, which
  leaves well-known cluster scoped kinds alone.
- `konjure.workload`: keeping only the documents that own pods
  (`WorkloadFilter`).
- `konjure.patch`: strategic merge, merge and JSON patches (`PatchFilter`,
  `apply_json_patch`). An unknown patch type raises `UnsupportedPatchError`.
- `konjure.application`: `split_helm_chart`, which splits a Helm chart label
  such as `foo-1.0.0` into name and version.
- `konjure.helmvalues`: Helm values from values files and `--set`,
  `--set-string` and `--set-file` lines (`HelmValues`), with filters to
  apply, flatten and mask documents by those values.
- `konjure.pipes`: readers over Python values and templates (`ErrorReader`,
  `read_one`, `encode`, `encode_json`, `TemplateReader` for Jinja2
  templates).
- `konjure.fileio`: `FileReader` and `FileWriter`, reading documents with
  path and index annotations and writing them back without them.
- `konjure.execio`: `ExecReader` and `ExecWriter`, exchanging YAML with
  other processes over standard output and standard input.
- `konjure.karg` and `konjure.kubectl`: building `kubectl` argument lists
  from typed options (`Resource`, `Selector`, `DryRun`, `Output`,
  `PatchType`, ...) and running them through `Kubectl` as readers and
  writers.
- `konjure.editor`: `editor_command` and `edit`, which opens a document in
  `$EDITOR` and reads it back.
- `konjure.tracing`: `log_exec`, trace logging of the commands that were
  run, on the `konjure.tracing` logger at the `TRACE` level (5).

## Examples

Parse a Helm style value line:

```python
from konjure.strvals import parse

parse("name=value,list={a,b},nested.key=1")
# {'name': 'value', 'list': ['a', 'b'], 'nested': {'key': 1}}
```

Build a `kubectl get` argument list from options:

```python
from konjure.karg import Selector, resource_kind, with_get_options

args = ["kubectl", "get"]
with_get_options(args, resource_kind("apps/v1", "Deployment"), Selector("app=web"))
# ['kubectl', 'get', 'Deployment.v1.apps', '--selector', 'app=web']
```

Sort documents for installation:

```python
from konjure.order import install_order

install_order()([{"kind": "Deployment"}, {"kind": "Namespace"}])
# [{'kind': 'Namespace'}, {'kind': 'Deployment'}]
```

Errors are raised as exceptions; nothing is reported through return values.

## What the package does not do

- There is no command-line program; the package is used from Python.
- There is no formatted output writer: documents are written as YAML
  streams by `FileWriter`, `ExecWriter` and `dump_documents` only, with no
  JSON, CSV, column, template or environment variable output.
- `konjure.application` does not build application resources from labels;
  it only splits Helm chart labels.