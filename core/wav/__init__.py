"""
core/wav — RIFF/WAVE PCM decoding.

Pure bytes-in, dataclasses-out decoding of uncompressed WAV data. No file
I/O — reading from disk lives in ingestion/wav_loader.py.

Public API:
    Types:    AudioMetadata, SampleBuffer, WavHeader
    Chunks:   ChunkReader, ChunkHeader
    Decoder:  decode, read_header, decode_samples
    Downmix:  downmix, FULL_SCALE
    Errors:   AnalysisError and its subclasses, ErrorKind (from core.errors)
"""

from core.errors import (
    AnalysisError,
    DataChunkMissingError,
    DecodeError,
    ErrorKind,
    FftInitError,
    FmtChunkMissingError,
    NotRiffError,
    NotWaveError,
    TruncatedHeaderError,
    UnsupportedBitDepthError,
    UnsupportedFormatError,
    WavIOError,
)
from core.wav.chunks import ChunkHeader, ChunkReader
from core.wav.decoder import decode, decode_samples, read_header
from core.wav.downmix import FULL_SCALE, downmix
from core.wav.types import AudioMetadata, SampleBuffer, WavHeader

__all__ = [
    "AudioMetadata",
    "SampleBuffer",
    "WavHeader",
    "ChunkHeader",
    "ChunkReader",
    "decode",
    "decode_samples",
    "read_header",
    "downmix",
    "FULL_SCALE",
    "AnalysisError",
    "DecodeError",
    "ErrorKind",
    "WavIOError",
    "NotRiffError",
    "NotWaveError",
    "FmtChunkMissingError",
    "UnsupportedFormatError",
    "UnsupportedBitDepthError",
    "DataChunkMissingError",
    "TruncatedHeaderError",
    "FftInitError",
]
