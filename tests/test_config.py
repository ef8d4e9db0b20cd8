import pytest

from sos_scanner.config import Settings, ScannerConfig


def test_defaults():
    config = ScannerConfig()
    assert config.confidence_threshold == 0.7
    assert config.max_candidates == 3
    assert config.capture_interval_s == 1.5
    assert config.allowed_labels == {"mask", "gloves", "syringe", "bandage", "catheter", "gown"}
    assert config.device_request().facing_mode == "environment"


def test_allowed_labels_are_normalised():
    config = ScannerConfig(allowed_labels={" Mask ", "GOWN", ""})
    assert config.allowed_labels == frozenset({"mask", "gown"})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"confidence_threshold": 1.5},
        {"max_candidates": 0},
        {"capture_interval_s": 0},
        {"jpeg_quality": 0},
    ],
)
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ValueError):
        ScannerConfig(**kwargs)


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("SOS_SCANNER_ENDPOINT", "http://detector:9000/detect")
    monkeypatch.setenv("SOS_SCANNER_CONFIDENCE_THRESHOLD", "0.8")
    monkeypatch.setenv("SOS_SCANNER_ALLOWED_LABELS", '["Mask", "Tape"]')
    monkeypatch.setenv("SOS_SCANNER_RESTRICT_CONFIRMATION", "false")

    config = Settings().to_config()
    assert config.endpoint == "http://detector:9000/detect"
    assert config.confidence_threshold == 0.8
    assert config.allowed_labels == {"mask", "tape"}
    assert config.restrict_confirmation is False
