"""Tests for voucher id generation."""

import uuid

import pytest

from voucherdesk.util import _CROCKFORD32, fallback_token, new_voucher_id


def test_primary_ids_are_uuid4() -> None:
    vid = new_voucher_id()
    assert uuid.UUID(vid).version == 4


def test_fallback_token_shape() -> None:
    token = fallback_token(timestamp_ms=1_760_000_000_000)
    assert len(token) == 26
    assert set(token) <= set(_CROCKFORD32)


def test_degraded_path_without_os_entropy(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    def no_entropy():
        raise NotImplementedError("no randomness source")

    monkeypatch.setattr(uuid, "uuid4", no_entropy)

    ids = [new_voucher_id() for _ in range(200)]

    assert all(len(vid) == 26 for vid in ids)
    assert len(set(ids)) == 200
    assert "fallback voucher id generator" in caplog.text
