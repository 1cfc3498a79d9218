"""Interactive editing of a document in the user's editor."""

from __future__ import annotations

import contextlib
import json
import os
import subprocess
import sys
import tempfile
from typing import Any, Iterator, List

import yaml

from konjure.nodes import read_documents


def editor_command(filename: str) -> List[str]:
    """Return the argument list that opens ``filename`` in the configured editor."""
    windows = os.name == "nt"
    editor = os.environ.get("EDITOR") or ("notepad" if windows else "vi")

    if " " not in editor:
        return [editor, filename]
    if "\"'\\" not in editor:
        return editor.split(" ") + [filename]

    shell = os.environ.get("SHELL") or ("cmd" if windows else "/bin/bash")
    return [shell, "/C" if windows else "-c", f"{editor} {json.dumps(filename)}"]


@contextlib.contextmanager
def _terminal() -> Iterator[Any]:
    stdin = sys.stdin
    if stdin is not None and stdin.isatty():
        yield stdin
        return
    try:
        tty = open("/dev/tty", "rb")
    except OSError as exc:
        raise RuntimeError("unable to open terminal") from exc
    with tty:
        yield tty


def edit(document: Any, prefix: str = "konjure") -> Any:
    """Open the document in an editor and return the edited document.

    An emptied file leaves the document unchanged. Raises RuntimeError when no
    terminal is available and CalledProcessError when the editor fails.
    """
    fd, name = tempfile.mkstemp(prefix=prefix.replace(" ", "-") + "-", suffix=".yaml")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                document, f, sort_keys=False, default_flow_style=False, allow_unicode=True
            )

        with _terminal() as stdin:
            subprocess.run(editor_command(name), stdin=stdin, check=True)

        with open(name, encoding="utf-8") as f:
            documents = read_documents(f.read())
        return documents[0] if documents else document
    finally:
        with contextlib.suppress(OSError):
            os.remove(name)