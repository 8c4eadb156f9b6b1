from pathlib import Path

from roofroute.config import Settings


def test_defaults_point_at_bundled_dataset():
    config = Settings()

    assert config.zip_centroids_file.name == "us_zip_centroids.csv"
    assert config.zip_centroids_file.exists()
    assert config.geocode_delay_seconds == 1.1
    assert "RoofRoute" in config.geocoder_user_agent


def test_environment_overrides(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("ROOFROUTE_GEOCODE_DELAY_SECONDS", "2.5")
    monkeypatch.setenv("ROOFROUTE_ZIP_CENTROIDS_FILE", str(tmp_path / "zips.csv"))
    monkeypatch.setenv("ROOFROUTE_FRONTEND_ALLOWED_ORIGINS", '["https://ops.example.com", "https://field.example.com"]')

    config = Settings()

    assert config.geocode_delay_seconds == 2.5
    assert config.zip_centroids_file == (tmp_path / "zips.csv").resolve()
    assert config.frontend_allowed_origins == ("https://ops.example.com", "https://field.example.com")
