#!/usr/bin/env python3

"""
Machine Faults

Every fatal condition the interpreter can hit while running a program derives
from MachineFault.  The module raising the fault knows what went wrong, but
only the cycle driver knows which instruction was executing, so it fills in
the opcode and address with locate() before handing the fault to the host.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class MachineFault(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message
        self.opcode = None
        self.address = None
        self.debug_info = None

    def locate(self, opcode, address, debug_info=None):
        self.opcode = opcode
        self.address = address
        self.debug_info = debug_info

    def __str__(self):
        if self.address is None:
            return self.message

        if self.opcode is None:
            text = "{} (fetching from address 0x{:03x})".format(self.message, self.address)
        else:
            text = "{} (opcode 0x{:04x} at address 0x{:03x})".format(self.message, self.opcode, self.address)

        if self.debug_info:
            text += "\n" + self.debug_info

        return text
