#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Command line interface.

copayproof [--bws-url URL] [-v] wallet-file message-file output-file

The wallet file is the SJCL encrypted Copay wallet export,
the message file content is signed byte for byte,
the output file receives the JSON array of signed addresses.
"""

import argparse
import getpass
import json
import logging
import sys
from typing import Any, List, Optional

from copayproof import __version__, name, sjcl
from copayproof.alias import String
from copayproof.bws import BWS_URL_ENV, BWSClient
from copayproof.enumeration import AddressSigner, enumerate_records
from copayproof.exceptions import (
    ConfigurationError,
    CopayProofError,
    CopayProofRuntimeError,
    CopayProofValueError,
)
from copayproof.output import AttestationWriter
from copayproof.policy import resolve_policy
from copayproof.wallet import WalletMetadata

logger = logging.getLogger(__name__)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=name,
        description="Sign a message with the keys of every address "
        "issued by a Copay multisig wallet.",
    )
    parser.add_argument("wallet_file", metavar="wallet-file")
    parser.add_argument("message_file", metavar="message-file")
    parser.add_argument("output_file", metavar="output-file")
    parser.add_argument(
        "--bws-url",
        default=None,
        help=f"wallet service base url (default: ${BWS_URL_ENV} or BitPay's)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as file_:
        return file_.read()


def _read_wallet(path: str) -> str:
    try:
        return _read_bytes(path).decode("utf-8")
    except UnicodeDecodeError as e:
        raise ConfigurationError(f"invalid wallet file encoding: {e}") from e


def load_metadata(sealed: str, password: str) -> WalletMetadata:
    "Return the wallet metadata of the SJCL encrypted Copay export."

    decrypted = sjcl.decrypt(password, sealed)
    try:
        data: Any = json.loads(decrypted)
    except ValueError as e:
        raise ConfigurationError(f"invalid wallet JSON: {e}") from e
    return WalletMetadata.from_credentials(data)


def attest(
    metadata: WalletMetadata, message: String, status_client: Any, output_file: str
) -> int:
    """Write the signed records of all wallet addresses to output_file.

    status_client is anything with a get_status() method
    returning an AddressManagerStatus.
    Return the number of written records.
    """

    if not metadata.compliant_derivation:
        logger.warning("non-compliant derivation: addresses may not match")

    # fail on unusable policies before contacting the wallet service
    strategy = metadata.strategy
    status = status_client.get_status()

    copayer_index = status.copayer_index
    if copayer_index is None:
        copayer_index = metadata.copayer_index
    policy = resolve_policy(
        strategy, metadata.network_params, metadata.account, copayer_index
    )
    logger.info("account path %s", policy.account_path_str)

    signer = AddressSigner(metadata, message, policy)
    records = enumerate_records(
        signer, status.receive_address_index, status.change_address_index
    )
    with AttestationWriter(output_file) as writer:
        for record in records:
            writer.write(record)
    return writer.count


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        sealed = _read_wallet(args.wallet_file)
        message = _read_bytes(args.message_file)
        password = getpass.getpass("Wallet password: ")
        metadata = load_metadata(sealed, password)
        client = BWSClient.from_metadata(metadata, args.bws_url)
        count = attest(metadata, message, client, args.output_file)
    except (
        CopayProofError,
        CopayProofValueError,
        CopayProofRuntimeError,
        OSError,
    ) as e:
        print(f"{name}: {e}", file=sys.stderr)
        return 1

    logger.info("%d signed addresses written to %s", count, args.output_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
