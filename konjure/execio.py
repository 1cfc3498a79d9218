"""Readers and writers that exchange YAML with external processes."""

from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from konjure.nodes import dump_documents, read_documents
from konjure.tracing import log_exec


@dataclass
class ExecReader:
    """Reads a YAML document stream from the standard output of a command."""

    args: List[str] = field(default_factory=list)
    cwd: Optional[str] = None
    env: Optional[Dict[str, str]] = None

    def read(self) -> List[Any]:
        """Run the command and parse its output.

        Raises subprocess.CalledProcessError if the command fails.
        """
        start = time.monotonic()
        process = None
        try:
            process = subprocess.run(
                self.args,
                cwd=self.cwd,
                env=self.env,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=False,
            )
        finally:
            log_exec(self.args, start, process, self.cwd)
        if process.returncode != 0:
            raise subprocess.CalledProcessError(
                process.returncode, self.args, process.stdout, process.stderr
            )
        return read_documents(process.stdout.decode("utf-8"))


@dataclass
class ExecWriter:
    """Writes a YAML document stream to the standard input of a command."""

    args: List[str] = field(default_factory=list)
    cwd: Optional[str] = None
    env: Optional[Dict[str, str]] = None

    def write(self, nodes: List[Any]) -> None:
        """Run the command, piping the documents to it.

        Raises subprocess.CalledProcessError if the command fails.
        """
        data = dump_documents(nodes).encode("utf-8")
        process = subprocess.Popen(
            self.args, cwd=self.cwd, env=self.env, stdin=subprocess.PIPE
        )
        start = time.monotonic()
        try:
            process.communicate(input=data)
        finally:
            log_exec(self.args, start, process, self.cwd)
        if process.returncode != 0:
            raise subprocess.CalledProcessError(process.returncode, self.args)