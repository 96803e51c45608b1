#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Incremental JSON array writer of the signed records.

Records are written to a temporary file in the target directory,
which is renamed over the target only when the array is complete:
a failed run never leaves a truncated attestation behind.
"""

import json
import os
import tempfile
from types import TracebackType
from typing import IO, Optional, Type

from copayproof.record import SignedRecord


class AttestationWriter:
    """Context manager writing a JSON array of SignedRecord.

    The array opens with "[\\n", records are indented by two spaces
    and separated by ",\\n", and it closes with "\\n]\\n".
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self.count = 0
        self._tmp_path: Optional[str] = None
        self._file: Optional[IO[str]] = None

    def __enter__(self) -> "AttestationWriter":
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, self._tmp_path = tempfile.mkstemp(
            dir=directory, prefix=f".{os.path.basename(self.path)}.", suffix=".tmp"
        )
        self._file = os.fdopen(fd, "w", encoding="utf-8")
        self._file.write("[\n")
        return self

    def write(self, record: SignedRecord) -> None:
        if self._file is None:
            raise ValueError("writer is not open")
        if self.count:
            self._file.write(",\n")
        self._file.write(json.dumps(record.to_dict(), indent=2))
        self.count += 1

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        if self._file is None or self._tmp_path is None:
            raise ValueError("writer is not open")
        try:
            if exc_type is None:
                self._file.write("\n]\n" if self.count else "]\n")
                self._file.flush()
                os.fsync(self._file.fileno())
            self._file.close()
            if exc_type is None:
                os.replace(self._tmp_path, self.path)
        finally:
            if os.path.exists(self._tmp_path):
                os.unlink(self._tmp_path)
            self._file = None
            self._tmp_path = None
