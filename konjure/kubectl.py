"""Building ``kubectl`` invocations as readers, writers and commands."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional

from konjure.execio import ExecReader, ExecWriter
from konjure.karg import (
    Option,
    with_apply_options,
    with_create_options,
    with_delete_options,
    with_get_options,
    with_patch_options,
    with_wait_options,
)


def _fraction(value: int, unit: int) -> str:
    whole, rest = divmod(value, unit)
    if not rest:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}." + str(rest).zfill(digits).rstrip("0")


def _format_duration(duration: timedelta) -> str:
    """Format a duration as ``1h2m3.5s``, ``500ms`` and the like."""
    ns = (duration // timedelta(microseconds=1)) * 1000
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_fraction(ns, 1_000_000)}ms"
    hours, rest = divmod(ns, 3_600 * 10**9)
    minutes, seconds = divmod(rest, 60 * 10**9)
    text = sign
    if hours:
        text += f"{hours}h{minutes}m"
    elif minutes:
        text += f"{minutes}m"
    return text + _fraction(seconds, 10**9) + "s"


@dataclass
class Kubectl:
    """Global settings for running ``kubectl``."""

    binary: str = ""
    kubeconfig: str = ""
    context: str = ""
    namespace: str = ""
    request_timeout: Optional[timedelta] = None

    def command(self, *args: str) -> List[str]:
        """The full argument list: binary, global flags, then ``args``."""
        result = [self.binary or "kubectl"]
        if self.kubeconfig:
            result += ["--kubeconfig", self.kubeconfig]
        if self.context:
            result += ["--context", self.context]
        if self.namespace:
            result += ["--namespace", self.namespace]
        if self.request_timeout:
            result += ["--request-timeout", _format_duration(self.request_timeout)]
        result.extend(args)
        return result

    def reader(self, *args: str) -> ExecReader:
        """A reader over the YAML output of the given kubectl arguments."""
        return ExecReader(self.command(*args, "--output=yaml"))

    def writer(self, *args: str) -> ExecWriter:
        """A writer piping YAML to the given kubectl arguments."""
        return ExecWriter(self.command(*args, "--filename=-"))

    def get(self, *options: Option) -> ExecReader:
        """A reader getting resources."""
        reader = self.reader("get")
        with_get_options(reader.args, *options)
        return reader

    def create(self, *options: Option) -> ExecWriter:
        """A writer creating resources."""
        writer = self.writer("create")
        with_create_options(writer.args, *options)
        return writer

    def apply(self, *options: Option) -> ExecWriter:
        """A writer applying resources."""
        writer = self.writer("apply")
        with_apply_options(writer.args, *options)
        return writer

    def delete(self, *options: Option) -> ExecWriter:
        """A writer deleting resources."""
        writer = self.writer("delete")
        with_delete_options(writer.args, *options)
        return writer

    def patch(self, *options: Option) -> ExecWriter:
        """A writer patching resources."""
        writer = self.writer("patch")
        with_patch_options(writer.args, *options)
        return writer

    def wait(self, *options: Option) -> List[str]:
        """The argument list for waiting on conditions."""
        args = self.command("wait")
        with_wait_options(args, *options)
        return args