"""Tests for Kubernetes quantity parsing."""

from __future__ import annotations

from usagelog.domain.quantity_parser import parse_quantity


def test_parse_plain_integers() -> None:
    assert parse_quantity("2") == 2
    assert parse_quantity(4) == 4
    assert parse_quantity("110") == 110


def test_parse_fractions_round_up() -> None:
    assert parse_quantity("500m") == 1
    assert parse_quantity("1500m") == 2
    assert parse_quantity("2000m") == 2
    assert parse_quantity("0.1") == 1
    assert parse_quantity("250000000n") == 1


def test_parse_binary_suffixes() -> None:
    assert parse_quantity("1Ki") == 1024
    assert parse_quantity("128Mi") == 128 * 1024**2
    assert parse_quantity("1Gi") == 1024**3


def test_parse_decimal_suffixes() -> None:
    assert parse_quantity("2G") == 2_000_000_000
    assert parse_quantity("1k") == 1000
    assert parse_quantity("1e3") == 1000


def test_parse_empty_and_invalid_values() -> None:
    assert parse_quantity(None) == 0
    assert parse_quantity("") == 0
    assert parse_quantity("<none>") == 0
    assert parse_quantity("lots") == 0
    assert parse_quantity("-1") == 0
