import logging

import pytest


@pytest.fixture
def sample_subtitles():
    return [
        {"start": 0, "end": 5000, "text": "Hello world"},
        {"start": 5000, "end": 10000, "text": "This is a test", "speaker": 0},
        {"start": 10000, "end": 15000, "text": "Subtitle processing", "speaker": 1},
    ]


@pytest.fixture(autouse=True)
def restore_root_logging():
    """setup_logging() replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
