#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

from dataclasses import dataclass, field
from typing import Dict, Tuple

from dataclasses_json import DataClassJsonMixin, config
from dataclasses_json.core import Json


@dataclass(frozen=True)
class SignedRecord(DataClassJsonMixin):
    address: str
    threshold: int
    # full derivation path from the master key, e.g. "m/44'/0'/0'/0/2"
    path: str
    # ordered as in the redeem script
    public_keys: Tuple[str, ...] = field(metadata=config(field_name="publicKeys"))
    # operator public key -> base64 compact signature
    signatures: Dict[str, str]
    # last address of its chain: in-memory only, never serialized
    last: bool = field(default=False, compare=False)

    def to_dict(self, encode_json=False) -> Dict[str, Json]:
        result = super().to_dict(encode_json)
        result.pop("last", None)
        return result
