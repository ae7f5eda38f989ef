"""Raw subprocess result shared by the platform strategies.

Strategies hand this to the normalizer; callers only ever see
``ProcessOutput``.
"""

from __future__ import annotations

import dataclasses

from scriptrun.errors import CaptureFailure


@dataclasses.dataclass(frozen=True)
class SubprocessResult:
    """Untrimmed result of a script invocation. Internal transport only."""

    returncode: int
    stdout: str
    stderr: str


def decode_stream(data: bytes | None, encoding: str, stream: str) -> str:
    """Decode a captured stream.

    ``None`` means the stream was not captured (inherited or discarded) and
    decodes to an empty string.

    Raises:
        CaptureFailure: If *data* is not valid in *encoding*.
    """
    if data is None:
        return ""
    try:
        return data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        msg = f"Could not decode {stream} as {encoding}: {exc}"
        raise CaptureFailure(msg) from exc
