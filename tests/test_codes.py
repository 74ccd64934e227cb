# tests/test_codes.py

"""
Generated identifiers: container codes, SKUs and product display names.
"""

import re

import pytest

from app.utils import codes


def test_to_base36():
    assert codes.to_base36(0) == "0"
    assert codes.to_base36(35) == "Z"
    assert codes.to_base36(36) == "10"
    assert codes.to_base36(1295) == "ZZ"
    with pytest.raises(ValueError):
        codes.to_base36(-1)


def test_container_code_shape():
    code = codes.generate_container_code(now_ms=36 ** 3)
    assert re.fullmatch(r"CONT-1000-[0-9A-Z]{4}", code)


def test_sku_shape():
    sku = codes.generate_sku()
    assert re.fullmatch(r"KC-[0-9A-Z]+-[0-9A-Z]{2}", sku)


def test_product_name_shape():
    for _ in range(50):
        name = codes.generate_product_name()
        assert re.fullmatch(r"\d{4}-3", name)
        assert 1000 <= int(name[:4]) <= 9999


def test_container_codes_differ():
    generated = {codes.generate_container_code() for _ in range(20)}
    assert len(generated) == 20
