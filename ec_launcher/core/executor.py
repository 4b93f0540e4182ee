"""
Delegate execution.

The cached binary is run as a child process with the launcher's arguments.
Its standard output is captured in full, checked to be valid UTF-8, and
written byte for byte to the launcher's standard output once the child has
exited. Standard error and standard input are inherited.
"""

import io
import logging
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Optional, Sequence, Union

from .exceptions import ExecutionFailed, OutputDecodingFailed

logger = logging.getLogger(__name__)

# Exit code used when the launcher fails or the child has no exit status
FALLBACK_EXIT_CODE = 1

OUTPUT_ENCODING = "utf-8"


@dataclass(frozen=True)
class ExitOutcome:
    """
    Result of a delegate run.

    Attributes:
        exit_code: Code the launcher should exit with
        output: Raw standard output of the delegate, valid UTF-8
    """

    exit_code: int
    output: bytes

    @property
    def text(self) -> str:
        """The captured output decoded as UTF-8."""
        return self.output.decode(OUTPUT_ENCODING)


def exit_code_from_returncode(returncode: int) -> int:
    """
    Map a subprocess return code to the launcher's exit code.

    A negative return code means the child was terminated by a signal and
    has no exit status of its own.
    """
    if returncode < 0:
        return FALLBACK_EXIT_CODE
    return returncode


def run_delegate(binary_path: Union[str, Path], args: Sequence[str]) -> ExitOutcome:
    """
    Run the delegate binary and capture its standard output.

    Args:
        binary_path: Path to the cached binary
        args: Arguments passed through unmodified and in order

    Returns:
        ExitOutcome with the child's exit code and raw output

    Raises:
        ExecutionFailed: If the binary cannot be spawned
        OutputDecodingFailed: If the output is not valid UTF-8

    Example:
        >>> outcome = run_delegate(Path("cache/bin/ec-linux-amd64"), ["--version"])
        >>> outcome.exit_code
        0
    """
    binary_path = Path(binary_path)
    cmd = [str(binary_path), *args]
    logger.debug(f"Running: {cmd}")

    try:
        result = subprocess.run(cmd, stdout=subprocess.PIPE)
    except OSError as e:
        raise ExecutionFailed(binary_path, e) from e

    try:
        result.stdout.decode(OUTPUT_ENCODING)
    except UnicodeDecodeError as e:
        raise OutputDecodingFailed(binary_path, e) from e

    exit_code = exit_code_from_returncode(result.returncode)
    if exit_code != result.returncode:
        logger.warning(
            f"{binary_path.name} was terminated by signal {-result.returncode}"
        )
    logger.debug(f"{binary_path.name} exited with code {exit_code}")

    return ExitOutcome(exit_code=exit_code, output=result.stdout)


def forward_output(outcome: ExitOutcome, stream: Optional[IO] = None) -> None:
    """
    Write the captured delegate output verbatim to stream (default: stdout).

    Text streams backed by a binary buffer receive the original bytes through
    that buffer, bypassing their encoding and newline translation. Binary
    streams are written to directly. A text stream without a buffer (such as
    io.StringIO) receives the decoded text.
    """
    if stream is None:
        stream = sys.stdout

    buffer = getattr(stream, "buffer", None)
    if buffer is not None:
        stream.flush()
        buffer.write(outcome.output)
        buffer.flush()
    elif isinstance(stream, io.TextIOBase):
        stream.write(outcome.text)
        stream.flush()
    else:
        stream.write(outcome.output)
        stream.flush()


__all__ = [
    "FALLBACK_EXIT_CODE",
    "ExitOutcome",
    "exit_code_from_returncode",
    "run_delegate",
    "forward_output",
]
