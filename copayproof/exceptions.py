#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Exception classes.

The CopayProofValueError and CopayProofRuntimeError classes discriminate
between low level encoding and cryptography errors raised by copayproof
and those raised by other codebase;
they derive from the regular ValueError and RuntimeError.

CopayProofError is the base of the errors that stop the attestation
pipeline: each subclass marks one failure class, so that the command line
surface can report it without inspecting messages.
"""


class CopayProofValueError(ValueError):
    pass


class CopayProofRuntimeError(RuntimeError):
    pass


class BIP32DerivationError(CopayProofValueError):
    "Derivation impossible with the available key material."


class CopayProofError(Exception):
    pass


class ConfigurationError(CopayProofError):
    "Unknown derivation strategy or network, missing copayer index, etc."


class AuthenticationError(CopayProofError):
    "The wallet secret could not be authenticated: wrong password."


class UnsealError(CopayProofError):
    "The wallet secret could not be decrypted for any other reason."


class IntegrityError(CopayProofError):
    "Locally derived key material disagrees with the copayer key ring."


class ServiceError(CopayProofError):
    "The wallet coordination service failed or returned an error."
