"""
Basic tests for imapipe

Run with: pytest tests/
"""

import importlib
import logging

from imapipe import config
from imapipe import (
    DEFAULT_CONFIG,
    DescriptorError,
    ImageValidator,
    ImapipeError,
    PipelineConfig,
    PipelineError,
    __version__,
    setup_logging,
)
from imapipe.image import FormatDetector, ImageFormat


def test_version():
    """Test that version is defined"""
    assert __version__ == "1.0.0"


def test_error_hierarchy():
    """Test that errors share a base class"""
    assert issubclass(DescriptorError, ImapipeError)
    assert issubclass(PipelineError, ImapipeError)
    error = DescriptorError("x[", "unbalanced brackets")
    assert error.descriptor == "x["
    assert "unbalanced" in str(error)


def test_config_defaults():
    """Test configuration defaults"""
    assert DEFAULT_CONFIG.ROTATE_UPSCALE >= 1
    assert PipelineConfig(ROTATE_UPSCALE=0).ROTATE_UPSCALE == 1


def test_setup_logging(tmp_path):
    """Test logging setup with a rotating log file"""
    log_file = tmp_path / "logs" / "imapipe.log"
    logger = setup_logging("DEBUG", log_file=str(log_file))
    try:
        assert logger.name == "imapipe"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        assert logging.getLogger("PIL").level == logging.WARNING

        logging.getLogger("imapipe.test").info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text()
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


def test_format_detector():
    """Test format detection by extension"""
    assert FormatDetector.detect_format("a.JPG") is ImageFormat.JPEG
    assert FormatDetector.detect_format("a.txt") is None
    assert FormatDetector.supports_alpha(ImageFormat.PNG)
    assert not FormatDetector.supports_alpha(ImageFormat.JPEG)
    assert FormatDetector.supports_frames(ImageFormat.GIF)


def test_image_validator(png_file):
    """Test ImageValidator"""
    assert ImageValidator.is_valid(png_file)
    is_valid, error = ImageValidator.validate_file(png_file.parent)
    assert not is_valid
    assert "not a file" in error.lower()


def test_setup_logging_default_level(monkeypatch):
    """Test that setup_logging falls back to the configured level"""
    monkeypatch.setattr(DEFAULT_CONFIG, "LOG_LEVEL", "warning")
    logger = setup_logging()
    try:
        assert logger.level == logging.WARNING
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


def test_config_malformed_environment(monkeypatch):
    """Test that malformed numeric environment values fall back to defaults"""
    monkeypatch.setenv("IMAPIPE_ROTATE_UPSCALE", "abc")
    monkeypatch.setenv("IMAPIPE_MAX_FILE_SIZE", "lots")
    try:
        reloaded = importlib.reload(config)
        assert reloaded.DEFAULT_CONFIG.ROTATE_UPSCALE == 2
        assert reloaded.DEFAULT_CONFIG.MAX_FILE_SIZE == 500 * 1024 * 1024
    finally:
        monkeypatch.delenv("IMAPIPE_ROTATE_UPSCALE")
        monkeypatch.delenv("IMAPIPE_MAX_FILE_SIZE")
        importlib.reload(config)
