import os

import pytest

from . import build_zip


@pytest.fixture
def random_content():
    return os.urandom(1024)


@pytest.fixture
def text_content():
    return b"The quick brown fox jumps over the lazy dog.\n" * 50


@pytest.fixture
def archive(random_content, text_content):
    return build_zip([
        ("docs/", b""),
        ("docs/readme.txt", text_content),
        ("empty/", b""),
        ("random.bin", random_content),
        ("notes.txt", b"short note"),
    ])
