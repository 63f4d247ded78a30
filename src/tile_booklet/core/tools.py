"""
Module: core.tools

Purpose:
    Single narrow interface for every external capability the pipeline
    relies on (image crop, page montage, PDF assembly, PDF compression).
    Each call returns a ToolResult so the orchestration layer can react to
    failures in one uniform way instead of discovering missing output later.

Key Functions:
    - invoke(): Run an in-process capability (Pillow, reportlab)
    - run_command(): Run an external executable (Ghostscript)

Key Classes:
    - ToolResult: Outcome of one tool invocation
    - ToolError: Raised by ToolResult.raise_for_failure()

Dependencies:
    - subprocess (std)

Used By:
    - extractor.pipeline: crop and grid split
    - builder.output: montage, PDF assembly, compression
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

logger = logging.getLogger(__name__)


class ToolError(Exception):
    """An external tool invocation failed."""

    def __init__(self, result: "ToolResult"):
        super().__init__(f"{result.tool} failed: {result.message}")
        self.result = result


@dataclass(frozen=True)
class ToolResult:
    """
    Outcome of one tool invocation (immutable).

    Attributes:
        tool: Capability name ("crop", "montage", "pdf", "compress", ...)
        ok: True if the tool succeeded and produced its output
        output: Path written by the tool, if any
        message: Failure description (empty on success)
        returncode: Process exit code for subprocess tools
        value: Return value of an in-process tool

    Example:
        >>> result = invoke("crop", crop_image, src, box, dst, output=dst)
        >>> result.raise_for_failure()
    """

    tool: str
    ok: bool
    output: Optional[Path] = None
    message: str = ""
    returncode: Optional[int] = None
    value: Any = None

    def raise_for_failure(self) -> "ToolResult":
        """Raise ToolError if the invocation failed, else return self."""
        if not self.ok:
            raise ToolError(self)
        return self


def invoke(
    tool: str,
    func: Callable[..., Any],
    *args: Any,
    output: Optional[Path] = None,
    **kwargs: Any,
) -> ToolResult:
    """
    Run an in-process capability and capture its outcome.

    I/O and argument errors (OSError, ValueError) become a failed result;
    anything else is a programming error and propagates.

    Args:
        tool: Capability name for reporting
        func: Callable implementing the capability
        output: Path the capability is expected to create
        *args, **kwargs: Passed through to func

    Returns:
        ToolResult with ok=False if func raised or output is missing
    """
    try:
        value = func(*args, **kwargs)
    except (OSError, ValueError) as e:
        logger.debug(f"{tool} raised {type(e).__name__}: {e}")
        return ToolResult(tool=tool, ok=False, output=output, message=str(e))

    if output is not None and not output.exists():
        return ToolResult(
            tool=tool,
            ok=False,
            output=output,
            message=f"expected output not written: {output}",
            value=value,
        )

    return ToolResult(tool=tool, ok=True, output=output, value=value)


def run_command(
    tool: str,
    cmd: Sequence[str],
    output: Optional[Path] = None,
    *,
    timeout: Optional[float] = None,
) -> ToolResult:
    """
    Run an external executable and check its result.

    A missing executable, a non-zero exit code, a timeout, or a missing
    output file all produce a failed result.

    Args:
        tool: Capability name for reporting
        cmd: Command line (executable first)
        output: Path the command is expected to create
        timeout: Optional timeout in seconds

    Returns:
        ToolResult carrying the exit code and stderr on failure
    """
    logger.debug(f"Running {tool}: {' '.join(str(c) for c in cmd)}")
    try:
        proc = subprocess.run(
            [str(c) for c in cmd],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        return ToolResult(tool=tool, ok=False, output=output, message=f"executable not found: {cmd[0]}")
    except subprocess.TimeoutExpired:
        return ToolResult(tool=tool, ok=False, output=output, message=f"timed out after {timeout}s")

    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        return ToolResult(
            tool=tool,
            ok=False,
            output=output,
            message=f"exit code {proc.returncode}: {stderr}" if stderr else f"exit code {proc.returncode}",
            returncode=proc.returncode,
        )

    if output is not None and not output.exists():
        return ToolResult(
            tool=tool,
            ok=False,
            output=output,
            message=f"expected output not written: {output}",
            returncode=proc.returncode,
        )

    return ToolResult(tool=tool, ok=True, output=output, returncode=proc.returncode)
