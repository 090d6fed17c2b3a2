#!/usr/bin/env python3

"""
CPU Debugger

If the 'c8vm' logger is enabled for DEBUG, this will trace every cycle at
two points:
    * Fetch   - the address and the raw opcode word fetched from it
    * Execute - the machine state just before the instruction runs:
        * All 16 of the [V] registers, starting with most significant (Vf) and
          reducing to least significant (V0)
        * I  - Index register
        * DT - Delay timer
        * ST - Sound timer
        * PC - Program counter (address of the instruction)
        * OP - OpCode number
        * IN - Decoded instruction

If a fault occurs, all of the above is attached to the error, with the
addition of the stack pointer and stack contents.

The CPU checks is_live() once at startup and skips these calls altogether when
tracing is off, so a disabled debugger costs nothing per instruction.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging

logger = logging.getLogger("c8vm")


class Debugger:
    def __init__(self, log=None):
        self.log = logger if log is None else log

    def debug(self, state, address, instruction, verbose=False):
        timers = state.timers
        debug_str = (
            "V: 0x" + ("{:02x}" * 16) + " I: 0x{:04x} DT: 0x{:02x} DS: 0x{:02x} PC: 0x{:03x} OP: 0x{:04x} IN: {}"
        ).format(
            *[state.v[reg_num] for reg_num in range(15, -1, -1)] +
            [state.i, timers.dt, timers.ds, address, instruction.word, instruction.mnemonic()]
        )

        if verbose:
            stack_items = state.stack.get_items()
            stack_str = (" 0x{:03x}" * len(stack_items)).format(*stack_items)
            debug_str += "\nSP: {} Stack:{}".format(state.sp, stack_str or " (Empty)")

        return debug_str

    def is_live(self):
        return self.log.isEnabledFor(logging.DEBUG)

    def fetched(self, address, word):
        self.log.debug("FETCH PC: 0x%03x OP: 0x%04x", address, word)

    def output(self, state, address, instruction):
        self.log.debug("EXEC %s", self.debug(state, address, instruction))
