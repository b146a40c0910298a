import os
import sys
import logging
import dataclasses

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import config
from config import Settings, parse_bind_address
from logger_config import setup_logger


def test_defaults():
    settings = Settings.from_args(["--password", "s3cret"])
    assert settings == Settings(password="s3cret")
    assert settings.repo_dir == "./repository"
    assert settings.host == "0.0.0.0"
    assert settings.port == 8080
    assert settings.log_level == "INFO"
    assert settings.log_file is None


def test_all_options():
    settings = Settings.from_args([
        "-p", "s3cret",
        "-r", "/srv/maven",
        "-H", "127.0.0.1:9000",
        "--log-level", "DEBUG",
        "--log-file", "logs/mvnr.log",
    ])
    assert settings == Settings(
        password="s3cret",
        repo_dir="/srv/maven",
        host="127.0.0.1",
        port=9000,
        log_level="DEBUG",
        log_file="logs/mvnr.log"
    )


def test_password_is_required(capsys):
    with pytest.raises(SystemExit):
        Settings.from_args([])
    assert "--password" in capsys.readouterr().err


@pytest.mark.parametrize("host", ["localhost", "localhost:http", ":8080", "localhost:70000"])
def test_invalid_host_is_a_parser_error(host):
    with pytest.raises(SystemExit):
        Settings.from_args(["-p", "s3cret", "-H", host])


def test_settings_are_immutable():
    settings = Settings(password="s3cret")
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.password = "other"


def test_parse_bind_address():
    assert parse_bind_address("0.0.0.0:8080") == ("0.0.0.0", 8080)
    assert parse_bind_address("[::1]:8443") == ("::1", 8443)
    with pytest.raises(ValueError):
        parse_bind_address("0.0.0.0")


def test_setup_logger_is_idempotent(tmp_path):
    log_file = tmp_path / "logs" / "mvnr.log"
    logger = setup_logger("WARNING", str(log_file))
    logger = setup_logger("WARNING", str(log_file))
    try:
        assert logger.name == config.LOGGER_NAME
        assert len(logger.handlers) == 2
        console_handler = next(h for h in logger.handlers if not isinstance(h, logging.FileHandler))
        assert console_handler.level == logging.WARNING

        logger.debug("detailed line")
        for handler in logger.handlers:
            handler.flush()
        assert "detailed line" in log_file.read_text()
    finally:
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
