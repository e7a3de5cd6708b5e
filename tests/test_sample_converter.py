"""Tests for PCM conversion helpers."""
import io

import numpy as np
import pytest
import soundfile as sf

from shazam_forever.core.sample_converter import convert, to_pcm16, to_wav_bytes


class TestConvert:
    def test_extremes(self):
        samples = convert(bytes([0x00, 0x80, 0xFF, 0x7F]))
        assert samples.dtype == np.float64
        assert samples[0] == -1.0
        assert samples[1] == pytest.approx(0.999969, abs=1e-6)

    def test_trailing_odd_byte_dropped(self):
        samples = convert(bytes([0x00, 0x40, 0x12]))
        assert len(samples) == 1
        assert samples[0] == 0.5

    def test_empty(self):
        assert len(convert(b"")) == 0
        assert len(convert(b"\x01")) == 0


class TestToPcm16:
    def test_rounds_and_scales(self):
        pcm = to_pcm16([0.0, 1.0, -1.0, 0.5])
        assert pcm.tolist() == [0, 32767, -32767, 16384]

    def test_clips_out_of_range(self):
        assert to_pcm16([2.0, -2.0]).tolist() == [32767, -32768]


class TestToWavBytes:
    def test_mono_16bit_header(self):
        data = to_wav_bytes(np.array([0, 1, -1], dtype=np.int16), 16000)
        assert data[:4] == b"RIFF"
        samples, sample_rate = sf.read(io.BytesIO(data), dtype="int16")
        assert sample_rate == 16000
        assert samples.ndim == 1
        assert samples.tolist() == [0, 1, -1]
        assert sf.info(io.BytesIO(data)).subtype == "PCM_16"
