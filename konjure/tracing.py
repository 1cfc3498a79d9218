"""Trace logging of executed external commands.

The log is silent unless the ``konjure.tracing`` logger is enabled at the
TRACE level.
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import time
from typing import Any, Dict, Optional, Sequence

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

log = logging.getLogger("konjure.tracing")
log.addHandler(logging.NullHandler())


def _signal_name(number: int) -> str:
    try:
        return signal.Signals(number).name
    except ValueError:
        return f"signal {number}"


def log_exec(
    args: Optional[Sequence[str]],
    start: float,
    process: Any = None,
    cwd: Optional[str] = None,
) -> None:
    """Log a trace record for a finished command.

    ``start`` is a ``time.monotonic()`` timestamp taken before the command
    started; ``process`` is a finished Popen or CompletedProcess, if any.
    """
    if not log.isEnabledFor(TRACE):
        return

    request: Dict[str, Any] = {}
    if args:
        request = {
            "path": shutil.which(args[0]) or args[0],
            "args": list(args),
            "dir": cwd or "",
        }

    response: Dict[str, Any] = {}
    exit_code = -1
    returncode = getattr(process, "returncode", None)
    if returncode is not None:
        pid = getattr(process, "pid", None)
        if pid is not None:
            response["pid"] = pid
        response["totalTime"] = time.monotonic() - start
        if os.name == "posix":
            if returncode < 0:
                response["signal"] = _signal_name(-returncode)
            else:
                response["exitStatus"] = returncode
                exit_code = returncode
        else:
            response["exitCode"] = returncode
            exit_code = returncode

    log.log(
        TRACE,
        "Exit Code: %d",
        exit_code,
        extra={"exec_request": request, "exec_response": response},
        stacklevel=2,
    )