"""
core/errors.py — Exception taxonomy shared by the decoder, spectral engine and loader.

Every failure the pipeline can produce has its own exception class and a
stable ``ErrorKind`` tag, so the presentation layer can branch on the kind
and still show ``str(exc)`` to the user.

Hierarchy:
    AnalysisError
    ├── WavIOError            file unreadable
    ├── DecodeError           structural problems in the RIFF/WAVE bytes
    │   ├── NotRiffError
    │   ├── NotWaveError
    │   ├── FmtChunkMissingError
    │   ├── UnsupportedFormatError
    │   ├── UnsupportedBitDepthError
    │   ├── DataChunkMissingError
    │   └── TruncatedHeaderError
    └── FftInitError          transform backend could not run
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Stable identifiers for every pipeline failure."""

    IO_ERROR = "io_error"
    NOT_RIFF = "not_riff"
    NOT_WAVE = "not_wave"
    FMT_CHUNK_MISSING = "fmt_chunk_missing"
    UNSUPPORTED_FORMAT = "unsupported_format"
    UNSUPPORTED_BIT_DEPTH = "unsupported_bit_depth"
    DATA_CHUNK_MISSING = "data_chunk_missing"
    TRUNCATED_HEADER = "truncated_header"
    FFT_INIT_FAILURE = "fft_init_failure"


class AnalysisError(Exception):
    """Base class for all analysis failures.

    Every concrete subclass sets ``kind``. The message is human-readable and
    safe to display as-is.
    """

    kind: ErrorKind


class WavIOError(AnalysisError):
    """The WAV file could not be opened or read.

    Args:
        path: Path that failed to load.
        reason: Short description of the underlying OS error.
    """

    kind = ErrorKind.IO_ERROR

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read file {path!r}: {reason}")


class DecodeError(AnalysisError):
    """Base class for structural violations found while decoding."""


class NotRiffError(DecodeError):
    kind = ErrorKind.NOT_RIFF

    def __init__(self) -> None:
        super().__init__("File is not a RIFF container (missing 'RIFF' signature).")


class NotWaveError(DecodeError):
    kind = ErrorKind.NOT_WAVE

    def __init__(self) -> None:
        super().__init__("RIFF container is not WAVE (missing 'WAVE' form type).")


class FmtChunkMissingError(DecodeError):
    kind = ErrorKind.FMT_CHUNK_MISSING

    def __init__(self) -> None:
        super().__init__("No 'fmt ' chunk found before the end of the file.")


class UnsupportedFormatError(DecodeError):
    """The ``fmt `` chunk describes something other than plain PCM.

    Args:
        audio_format: The format tag read from the chunk.
        detail: Optional override for the message body.
    """

    kind = ErrorKind.UNSUPPORTED_FORMAT

    def __init__(self, audio_format: int, detail: str | None = None) -> None:
        self.audio_format = audio_format
        message = detail or (
            f"Only PCM WAV is supported (audio format 1), got format 0x{audio_format:04X}."
        )
        super().__init__(message)


class UnsupportedBitDepthError(DecodeError):
    """Sample width other than 8-bit unsigned or 16-bit signed."""

    kind = ErrorKind.UNSUPPORTED_BIT_DEPTH

    def __init__(self, bits_per_sample: int) -> None:
        self.bits_per_sample = bits_per_sample
        super().__init__(
            f"Unsupported bit depth: {bits_per_sample} bits per sample (expected 8 or 16)."
        )


class DataChunkMissingError(DecodeError):
    kind = ErrorKind.DATA_CHUNK_MISSING

    def __init__(self) -> None:
        super().__init__("No 'data' chunk found after the 'fmt ' chunk.")


class TruncatedHeaderError(DecodeError):
    """A header or fixed-size field extends past the end of the buffer.

    Args:
        offset: Cursor position where the read was attempted.
        needed: Bytes the read required.
        available: Bytes that were actually left.
    """

    kind = ErrorKind.TRUNCATED_HEADER

    def __init__(self, offset: int, needed: int, available: int) -> None:
        self.offset = offset
        self.needed = needed
        self.available = available
        super().__init__(
            f"Truncated header at byte {offset}: needed {needed} bytes, {available} available."
        )


class FftInitError(AnalysisError):
    """The FFT backend could not be initialised or run for the requested size."""

    kind = ErrorKind.FFT_INIT_FAILURE

    def __init__(self, fft_size: int, reason: str) -> None:
        self.fft_size = fft_size
        super().__init__(f"FFT initialisation failed for size {fft_size}: {reason}")
