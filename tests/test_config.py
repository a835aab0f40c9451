"""
Tests for AnalyzerConfig validation and environment loading.
"""

import pytest

from spectrum_analyzer import AnalyzerConfig, ConfigError, EqShelf

ENV_VARS = [
    "SPECTRUM_SAMPLE_RATE",
    "SPECTRUM_FFT_SIZE",
    "SPECTRUM_BARS",
    "SPECTRUM_INPUT_GAIN",
    "SPECTRUM_PEAK_HOLD_MS",
    "SPECTRUM_MIN_DB",
    "SPECTRUM_MAX_DB",
]


@pytest.fixture
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestDefaults:
    def test_default_values(self, config):
        assert config.sample_rate == 44100
        assert config.fft_size == 2048
        assert config.bar_count == 100
        assert config.input_gain == 0.01
        assert config.peak_hold_ms == 1000
        assert (config.min_db, config.max_db) == (-60.0, 20.0)
        assert config.eq_shelves == (
            EqShelf(400.0, 2.0),
            EqShelf(1000.0, 2.0),
            EqShelf(5000.0, 2.0),
        )

    def test_derived_values(self, config):
        assert config.bin_count == 1024
        assert config.bin_width == pytest.approx(44100 / 2048)
        assert config.nyquist == 22050
        assert config.block_seconds == pytest.approx(0.0464, abs=1e-4)
        assert config.floor_db == pytest.approx(-120.0)

    def test_shelf_list_stored_as_tuple(self):
        config = AnalyzerConfig(eq_shelves=[EqShelf(100, 1)])
        assert config.eq_shelves == (EqShelf(100, 1),)
        hash(config)

    def test_config_is_frozen(self, config):
        with pytest.raises(AttributeError):
            config.bar_count = 10


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"fft_size": 1},
            {"fft_size": 0},
            {"bar_count": 0},
            {"sample_rate": 0},
            {"min_freq": 0},
            {"min_freq": 22050},
            {"min_db": 20.0, "max_db": 20.0},
            {"peak_hold_ms": -1},
            {"input_gain": 0},
        ],
    )
    def test_invalid_config_rejected(self, kwargs):
        with pytest.raises(ConfigError):
            AnalyzerConfig(**kwargs)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            AnalyzerConfig(fft_size=1)

    def test_smallest_valid_fft(self):
        config = AnalyzerConfig(fft_size=2, sample_rate=8000)
        assert config.bin_count == 1


class TestFromEnv:
    def test_defaults_when_unset(self, clean_env):
        assert AnalyzerConfig.from_env() == AnalyzerConfig()

    def test_reads_variables(self, clean_env):
        clean_env.setenv("SPECTRUM_BARS", "50")
        clean_env.setenv("SPECTRUM_FFT_SIZE", "4096")
        clean_env.setenv("SPECTRUM_INPUT_GAIN", "0.5")
        config = AnalyzerConfig.from_env()
        assert config.bar_count == 50
        assert config.fft_size == 4096
        assert config.input_gain == 0.5

    def test_unparsable_value(self, clean_env):
        clean_env.setenv("SPECTRUM_FFT_SIZE", "big")
        with pytest.raises(ConfigError, match="SPECTRUM_FFT_SIZE"):
            AnalyzerConfig.from_env()

    def test_invalid_value_from_env(self, clean_env):
        clean_env.setenv("SPECTRUM_BARS", "0")
        with pytest.raises(ConfigError):
            AnalyzerConfig.from_env()
