#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"__init__ module for the copayproof package."

name = "copayproof"
__version__ = "2022.11.1"
__author__ = "The copayproof developers"
__author_email__ = "devs@copayproof.org"
__copyright__ = "Copyright (C) 2022 The copayproof developers"
__license__ = "MIT License"
