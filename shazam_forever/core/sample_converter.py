"""Convert between raw 16-bit PCM bytes, normalized float samples and WAV containers."""
import io

import numpy as np
import soundfile as sf

PCM16_SCALE_IN = 32768.0
PCM16_SCALE_OUT = 32767


def convert(raw: bytes) -> np.ndarray:
    """Interpret raw as little-endian int16 samples and scale each to [-1, 1].

    A trailing odd byte is dropped.
    """
    usable = len(raw) - (len(raw) % 2)
    pcm = np.frombuffer(raw[:usable], dtype="<i2")
    return pcm.astype(np.float64) / PCM16_SCALE_IN


def to_pcm16(samples) -> np.ndarray:
    """Scale float samples back to int16 with round(sample * 32767)."""
    scaled = np.round(np.asarray(samples, dtype=np.float64) * PCM16_SCALE_OUT)
    return np.clip(scaled, -32768, 32767).astype("<i2")


def to_wav_bytes(pcm: np.ndarray, sample_rate: int) -> bytes:
    """Wrap mono int16 samples in a WAV container."""
    buf = io.BytesIO()
    sf.write(buf, np.asarray(pcm, dtype=np.int16), sample_rate, format="WAV", subtype="PCM_16")
    return buf.getvalue()
