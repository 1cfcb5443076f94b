import numpy as np

from dndwheel.audio import synth


def test_tick_length_and_type():
    samples = synth.tick(600.0, duration_ms=30)
    assert samples.dtype == np.int16
    assert samples.shape == (int(synth.SAMPLE_RATE * 0.03),)
    # decays to silence
    assert abs(int(samples[-1])) < 200


def test_zero_length_tick():
    assert synth.tick(600.0, duration_ms=0).size == 0


def test_stereo_duplicates_channels():
    mono = synth.tick(550.0)
    stereo = synth.to_stereo(mono)
    assert stereo.shape == (mono.size, 2)
    assert np.array_equal(stereo[:, 0], stereo[:, 1])


def test_to_int16_clips():
    out = synth.to_int16(np.array([-2.0, 0.0, 2.0]))
    assert out.tolist() == [-32767, 0, 32767]


def test_fanfare_is_arpeggio_then_chord():
    fanfare = synth.win_fanfare()
    expected = synth.arpeggio([523, 659, 784]).size + synth.chord([523], duration=0.6).size
    assert fanfare.size == expected
    assert np.abs(fanfare).max() > 0
