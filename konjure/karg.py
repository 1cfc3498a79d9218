"""Typed command line options for ``kubectl`` sub-commands.

Each option knows which sub-commands accept it. The ``with_*_options``
functions append options to an argument list in place. They raise TypeError
for an option that the sub-command does not take.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, FrozenSet, List


@dataclass(frozen=True)
class Option:
    """A kubectl option that contributes arguments to a command line."""

    value: Any = None
    commands: ClassVar[FrozenSet[str]] = frozenset()

    def arguments(self) -> List[str]:
        """The arguments this option adds; none by default."""
        return []

    def apply(self, args: List[str]) -> None:
        """Add this option to the argument list in place."""
        args.extend(self.arguments())


@dataclass(frozen=True)
class Resource(Option):
    """A named resource or a resource type, passed as a plain argument."""

    value: str = ""
    commands = frozenset({"get", "patch"})

    def arguments(self) -> List[str]:
        return [self.value] if self.value else []


@dataclass(frozen=True)
class AllNamespaces(Option):
    """The ``--all-namespaces`` option; it also removes any namespace option."""

    value: bool = False
    commands = frozenset({"get"})

    def apply(self, args: List[str]) -> None:
        if not self.value:
            return
        kept: List[str] = []
        remaining = iter(args)
        for arg in remaining:
            if arg in ("--namespace", "-n"):
                next(remaining, None)
                continue
            if arg.startswith("--namespace=") or arg.startswith("-n="):
                continue
            kept.append(arg)
        kept.append("--all-namespaces")
        args[:] = kept


@dataclass(frozen=True)
class Selector(Option):
    """The ``--selector`` option."""

    value: str = ""
    commands = frozenset({"get", "delete"})

    def arguments(self) -> List[str]:
        return ["--selector", self.value] if self.value else []


@dataclass(frozen=True)
class DryRun(Option):
    """The ``--dry-run=none|client|server`` option."""

    value: str = ""
    commands = frozenset({"create", "apply", "delete", "patch"})

    def arguments(self) -> List[str]:
        return [f"--dry-run={self.value}"] if self.value else []

    def is_dry_run(self) -> bool:
        """True unless the value is empty or "none"."""
        return self.value not in ("", "none")


@dataclass(frozen=True)
class IgnoreNotFound(Option):
    """The ``--ignore-not-found`` option."""

    value: bool = False
    commands = frozenset({"get", "delete"})

    def arguments(self) -> List[str]:
        return ["--ignore-not-found"] if self.value else []


@dataclass(frozen=True)
class Output(Option):
    """The ``--output`` option."""

    value: str = ""
    commands = frozenset({"apply", "patch"})

    def arguments(self) -> List[str]:
        return [f"--output={self.value}"] if self.value else []


@dataclass(frozen=True)
class Wait(Option):
    """The ``--wait`` option."""

    value: bool = False
    commands = frozenset({"apply", "delete"})

    def arguments(self) -> List[str]:
        return ["--wait"] if self.value else []


@dataclass(frozen=True)
class FieldManager(Option):
    """The ``--field-manager`` option of the patch command."""

    value: str = ""
    commands = frozenset({"patch"})

    def arguments(self) -> List[str]:
        return ["--field-manager", self.value] if self.value else []


_PATCH_MEDIA_TYPES = {
    "application/json-patch+json": "json",
    "application/merge-patch+json": "merge",
    "application/strategic-merge-patch+json": "strategic",
}


@dataclass(frozen=True)
class PatchType(Option):
    """The ``--type=json|merge|strategic`` option; media types are accepted too."""

    value: str = ""
    commands = frozenset({"patch"})

    def arguments(self) -> List[str]:
        if not self.value:
            return []
        return [f"--type={_PATCH_MEDIA_TYPES.get(self.value, self.value)}"]


@dataclass(frozen=True)
class Patch(Option):
    """The ``--patch`` option of the patch command."""

    value: str = ""
    commands = frozenset({"patch"})

    def arguments(self) -> List[str]:
        return ["--patch", self.value] if self.value else []


DRY_RUN_NONE = DryRun("none")
DRY_RUN_CLIENT = DryRun("client")
DRY_RUN_SERVER = DryRun("server")

OUTPUT_JSON = Output("json")
OUTPUT_YAML = Output("yaml")
OUTPUT_WIDE = Output("wide")
OUTPUT_NAME = Output("name")

FIELD_MANAGER_KUBECTL_PATCH = FieldManager("kubectl-patch")

PATCH_TYPE_JSON = PatchType("json")
PATCH_TYPE_MERGE = PatchType("merge")
PATCH_TYPE_STRATEGIC = PatchType("strategic")


def _with_options(command: str, args: List[str], options) -> None:
    for option in options:
        if command not in option.commands:
            raise TypeError(f"{type(option).__name__} is not a {command} option")
        option.apply(args)


def with_get_options(args: List[str], *options: Option) -> None:
    """Apply get options to the argument list."""
    _with_options("get", args, options)


def with_create_options(args: List[str], *options: Option) -> None:
    """Apply create options to the argument list."""
    _with_options("create", args, options)


def with_apply_options(args: List[str], *options: Option) -> None:
    """Apply apply options to the argument list."""
    _with_options("apply", args, options)


def with_delete_options(args: List[str], *options: Option) -> None:
    """Apply delete options to the argument list."""
    _with_options("delete", args, options)


def with_patch_options(args: List[str], *options: Option) -> None:
    """Apply patch options to the argument list."""
    _with_options("patch", args, options)


def with_wait_options(args: List[str], *options: Option) -> None:
    """Apply wait options to the argument list."""
    _with_options("wait", args, options)


def _group_version(api_version: str):
    group, sep, version = api_version.partition("/")
    if not sep:
        group, version = "", group
    return group, version


def resource_type(*resources: str) -> Resource:
    """A resource argument naming one or more resource types."""
    return Resource(",".join(resources))


def resource_kind(api_version: str, kind: str) -> Resource:
    """A resource argument from an API version and kind."""
    group, version = _group_version(api_version)
    return Resource(f"{kind}.{version}.{group}")


def resource_name(resource_type: str, resource_name: str) -> Resource:
    """A resource argument from a resource type and an optional name."""
    if not resource_name:
        return Resource(resource_type)
    return Resource(f"{resource_type}/{resource_name}")


def resource_kind_name(api_version: str, kind: str, name: str) -> Resource:
    """A resource argument from an API version, kind and name."""
    group, version = _group_version(api_version)
    return Resource(f"{kind}.{version}.{group}/{name}")


def output_custom_columns(*columns: str) -> Output:
    """Custom columns output; each column is ``<NAME>:<JSONPATH>``."""
    return Output("custom-columns=" + ",".join(columns))


def output_custom_columns_file(file: str) -> Output:
    return Output("custom-columns-file=" + file)


def output_go_template(tmpl: str) -> Output:
    return Output("go-template=" + tmpl)


def output_go_template_file(file: str) -> Output:
    return Output("go-template-file=" + file)


def output_json_path(path: str) -> Output:
    return Output("jsonpath=" + path)


def output_json_path_file(file: str) -> Output:
    return Output("jsonpath-file=" + file)