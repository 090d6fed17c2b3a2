#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading ROM binaries from the host's filesystem for later writing into
RAM.  Any OSError (missing file, no permission, etc.) is left for the caller to
report.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()
