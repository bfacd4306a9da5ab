# tests/test_config.py
import pytest

from config import read_page_size


def test_page_size_accepts_positive_values():
    assert read_page_size("10") == 10
    assert read_page_size("1") == 1


@pytest.mark.parametrize("raw", ["0", "-3", "ten"])
def test_page_size_rejects_bad_values(raw):
    with pytest.raises(ValueError):
        read_page_size(raw)
