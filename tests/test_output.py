#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `copayproof.output` module."

import json
import os

import pytest

from copayproof.output import AttestationWriter
from copayproof.record import SignedRecord


def _record(i: int, last: bool = False) -> SignedRecord:
    return SignedRecord(
        address=f"3address{i}",
        threshold=2,
        path=f"m/44'/0'/0'/0/{i}",
        public_keys=("02" + "11" * 32, "03" + "22" * 32),
        signatures={"02" + "11" * 32: f"signature{i}"},
        last=last,
    )


def test_empty(tmp_path) -> None:

    target = tmp_path / "attestation.json"
    with AttestationWriter(str(target)) as writer:
        pass
    assert writer.count == 0
    assert target.read_text(encoding="utf-8") == "[\n]\n"
    assert json.loads(target.read_text(encoding="utf-8")) == []
    assert os.listdir(tmp_path) == ["attestation.json"]


def test_records(tmp_path) -> None:

    target = tmp_path / "attestation.json"
    records = [_record(0), _record(1, last=True)]
    with AttestationWriter(str(target)) as writer:
        for record in records:
            writer.write(record)
        # nothing visible until the array is complete
        assert not target.exists()
    assert writer.count == 2

    text = target.read_text(encoding="utf-8")
    assert text.startswith("[\n{\n  \"address\": \"3address0\",\n")
    assert "\n},\n{\n" in text
    assert text.endswith("\n}\n]\n")

    data = json.loads(text)
    assert data == [r.to_dict() for r in records]
    assert list(data[0]) == ["address", "threshold", "path", "publicKeys", "signatures"]
    assert "last" not in data[1]
    assert os.listdir(tmp_path) == ["attestation.json"]


def test_overwrite(tmp_path) -> None:

    target = tmp_path / "attestation.json"
    target.write_text("stale", encoding="utf-8")
    with AttestationWriter(str(target)) as writer:
        writer.write(_record(0, last=True))
    assert json.loads(target.read_text(encoding="utf-8")) == [_record(0).to_dict()]


def test_failure_leaves_no_file(tmp_path) -> None:

    target = tmp_path / "attestation.json"
    with pytest.raises(RuntimeError, match="aborted"):
        with AttestationWriter(str(target)) as writer:
            writer.write(_record(0))
            raise RuntimeError("aborted")
    assert not target.exists()
    assert os.listdir(tmp_path) == []

    # a previous attestation is not clobbered
    target.write_text("previous", encoding="utf-8")
    with pytest.raises(RuntimeError, match="aborted"):
        with AttestationWriter(str(target)) as writer:
            writer.write(_record(0))
            raise RuntimeError("aborted")
    assert target.read_text(encoding="utf-8") == "previous"
    assert os.listdir(tmp_path) == ["attestation.json"]


def test_write_on_closed_writer(tmp_path) -> None:

    writer = AttestationWriter(str(tmp_path / "attestation.json"))
    with pytest.raises(ValueError, match="writer is not open"):
        writer.write(_record(0))
    with pytest.raises(ValueError, match="writer is not open"):
        writer.__exit__(None, None, None)

    path = tmp_path / "attestation.json"
    with AttestationWriter(str(path)) as writer:
        writer.write(_record(0))
    # closing twice
    with pytest.raises(ValueError, match="writer is not open"):
        writer.__exit__(None, None, None)
    assert path.exists()
