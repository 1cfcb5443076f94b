"""
Waveform generation for wheel sounds.

Samples are numpy int16 arrays, mono unless stated otherwise.
"""

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

SAMPLE_RATE = 44100


def _time_axis(duration: float, sample_rate: int = SAMPLE_RATE) -> NDArray[np.float64]:
    return np.arange(int(sample_rate * duration)) / sample_rate


def to_int16(signal: NDArray[np.float64]) -> NDArray[np.int16]:
    """Float signal in [-1, 1] to 16-bit samples, clipping overs."""
    return (np.clip(signal, -1.0, 1.0) * 32767).astype(np.int16)


def to_stereo(samples: NDArray[np.int16]) -> NDArray[np.int16]:
    """Duplicate a mono track into two interleaved channels."""
    return np.repeat(samples[:, np.newaxis], 2, axis=1)


def tick(frequency: float, duration_ms: float = 30, amplitude: float = 0.6) -> NDArray[np.int16]:
    """Short sine blip with a fast linear decay, like a pointer hitting a peg."""
    t = _time_axis(duration_ms / 1000.0)
    if t.size == 0:
        return np.zeros(0, dtype=np.int16)
    env = np.linspace(1.0, 0.0, t.size)
    return to_int16(np.sin(2 * np.pi * frequency * t) * env * amplitude)


def chord(
    frequencies: Sequence[float],
    duration: float = 0.6,
    decay: float = 1.7,
    amplitude: float = 0.45,
) -> NDArray[np.int16]:
    """Stacked sines fading out together."""
    t = _time_axis(duration)
    env = np.maximum(0.0, 1.0 - t * decay)
    voices = sum(np.sin(2 * np.pi * f * t) for f in frequencies) / max(1, len(frequencies))
    return to_int16(voices * env * amplitude)


def arpeggio(
    frequencies: Sequence[float],
    note_length: float = 0.09,
    amplitude: float = 0.4,
) -> NDArray[np.int16]:
    """Notes played one after another, each with its own decay."""
    notes = []
    for freq in frequencies:
        t = _time_axis(note_length)
        env = np.maximum(0.0, 1.0 - t / note_length)
        square = np.sign(np.sin(2 * np.pi * freq * t)) * 0.3
        notes.append(to_int16((np.sin(2 * np.pi * freq * t) * 0.7 + square) * env * amplitude))
    if not notes:
        return np.zeros(0, dtype=np.int16)
    return np.concatenate(notes)


def win_fanfare() -> NDArray[np.int16]:
    """Rising C-major arpeggio into a sustained triad."""
    return np.concatenate([
        arpeggio([523, 659, 784]),
        chord([523, 659, 784, 1047], duration=0.6),
    ])
