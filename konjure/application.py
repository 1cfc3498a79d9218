"""Helpers for deriving application metadata from resource labels."""

from __future__ import annotations

import re
from typing import Tuple

_SEMVER = re.compile(r"-(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)", re.ASCII)


def split_helm_chart(chart: str) -> Tuple[str, str]:
    """Split a Helm chart label such as ``foo-1.0.0`` into its name and version."""
    match = _SEMVER.search(chart)
    name = chart[: match.start()] if match else chart
    version = chart.removeprefix(name).removeprefix("-")
    return name, version