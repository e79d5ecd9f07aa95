"""
ingestion/wav_loader.py — File I/O boundary for WAV loading.

This is the ONLY module in the analysis pipeline that reads files from disk.
Everything downstream (core/wav/decoder.py, core/spectral/engine.py) takes
the bytes or arrays it produces — never file paths.

The whole file is read into memory; there is no streaming decode.

Usage:
    from ingestion.wav_loader import read_wav_bytes
    data = read_wav_bytes("/path/to/take.wav")
"""

from __future__ import annotations

import logging
from pathlib import Path

from core.errors import WavIOError

logger = logging.getLogger(__name__)

# Extensions offered by the file picker. Content is still validated by the decoder.
WAV_EXTENSIONS: frozenset[str] = frozenset({".wav", ".wave"})


def read_wav_bytes(path: str | Path) -> bytes:
    """Read a WAV file from disk and return its raw bytes.

    Args:
        path: Absolute or relative path to a .wav/.wave file.

    Returns:
        The complete file contents.

    Raises:
        WavIOError: File does not exist, is not a regular file, has an
            extension other than .wav/.wave, or could not be read
            (permissions, I/O failure).
    """
    file_path = Path(path)

    if not file_path.exists():
        raise WavIOError(str(file_path), "file not found")

    if not file_path.is_file():
        raise WavIOError(str(file_path), "not a regular file")

    if file_path.suffix.lower() not in WAV_EXTENSIONS:
        raise WavIOError(
            str(file_path),
            f"unsupported extension {file_path.suffix!r}, expected one of {sorted(WAV_EXTENSIONS)}",
        )

    try:
        data = file_path.read_bytes()
    except OSError as exc:
        raise WavIOError(str(file_path), exc.strerror or str(exc)) from exc

    logger.debug("Read %d bytes from %s", len(data), file_path.name)
    return data
