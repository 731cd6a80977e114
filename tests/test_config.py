from inkshot.config import Settings


def test_defaults_without_environment():
    settings = Settings.from_env({})

    assert settings == Settings("pillow", None, "WARNING")


def test_values_are_normalised():
    settings = Settings.from_env(
        {
            "INKSHOT_DITHER_BACKEND": " Magick ",
            "INKSHOT_MAGICK_PATH": "/usr/local/bin/gm",
            "INKSHOT_LOG_LEVEL": "debug",
        }
    )

    assert settings.backend == "magick"
    assert settings.magick_path == "/usr/local/bin/gm"
    assert settings.log_level == "DEBUG"


def test_empty_values_fall_back():
    settings = Settings.from_env({"INKSHOT_DITHER_BACKEND": "", "INKSHOT_MAGICK_PATH": ""})

    assert settings.backend == "pillow"
    assert settings.magick_path is None


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("INKSHOT_LOG_LEVEL", "info")

    assert Settings.from_env().log_level == "INFO"
