"""Reading resource documents from files and writing them back."""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

from konjure.nodes import clear_annotation, clear_empty_annotations, dump_documents, read_documents

PATH_ANNOTATION = "internal.config.kubernetes.io/path"
LEGACY_PATH_ANNOTATION = "config.kubernetes.io/path"
INDEX_ANNOTATION = "internal.config.kubernetes.io/index"
LEGACY_INDEX_ANNOTATION = "config.kubernetes.io/index"

_READER_ANNOTATIONS = (
    PATH_ANNOTATION,
    LEGACY_PATH_ANNOTATION,
    INDEX_ANNOTATION,
    LEGACY_INDEX_ANNOTATION,
)


def _annotate(document: Any, annotations: dict) -> None:
    if not isinstance(document, dict):
        return
    metadata = document.setdefault("metadata", {})
    if not isinstance(metadata, dict):
        return
    existing = metadata.get("annotations")
    if not isinstance(existing, dict):
        existing = {}
        metadata["annotations"] = existing
    existing.update(annotations)


@dataclass
class FileReader:
    """Reads the documents of a file, annotating each with its path and index.

    ``fs`` is an optional base directory used to resolve the name.
    """

    name: str
    fs: Optional[Union[str, os.PathLike]] = None

    def read(self) -> List[Any]:
        """Read and parse the file."""
        path = Path(self.fs) / self.name if self.fs is not None else Path(self.name)
        documents = read_documents(path.read_text(encoding="utf-8"))
        for index, document in enumerate(documents):
            _annotate(
                document,
                {
                    PATH_ANNOTATION: self.name,
                    LEGACY_PATH_ANNOTATION: self.name,
                    INDEX_ANNOTATION: str(index),
                    LEGACY_INDEX_ANNOTATION: str(index),
                },
            )
        return documents


@dataclass
class FileWriter:
    """Overwrites a file with documents, dropping the reader annotations.

    ``mkdir_all_perm`` creates missing parent directories with that mode.
    """

    name: str
    file_perm: int = 0o666
    mkdir_all_perm: Optional[int] = None

    def write(self, nodes: List[Any]) -> None:
        """Encode the documents and write them to the file."""
        documents = []
        for node in nodes:
            document = copy.deepcopy(node)
            for annotation in _READER_ANNOTATIONS:
                clear_annotation(document, annotation)
            documents.append(clear_empty_annotations(document))
        data = dump_documents(documents).encode("utf-8")

        if self.mkdir_all_perm:
            parent = os.path.dirname(self.name)
            if parent:
                os.makedirs(parent, mode=self.mkdir_all_perm, exist_ok=True)

        fd = os.open(self.name, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, self.file_perm)
        with os.fdopen(fd, "wb") as f:
            f.write(data)