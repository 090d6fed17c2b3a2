#!/usr/bin/env python3

"""
Machine State

Everything a running program can observe or change lives in one MachineState:
memory, registers, stack, framebuffer and timers.  There is no module-level
state, so several machines can run side by side, and copy() gives an
independent snapshot for comparisons in tests.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import FONT_LOCATION, NUM_REGISTERS, PROGRAM_ORIGIN, SYSTEM_FONT
from .framebuffer import Framebuffer
from .ram import RAM
from .stack import Stack
from .timers import Timers


class MachineState:
    def __init__(self, allow_wrapping=False):
        self.ram = RAM()
        self.ram.write_block(FONT_LOCATION, SYSTEM_FONT)
        self.v = memoryview(bytearray(NUM_REGISTERS))  # Bytearrays are mutable, so register updates are fast
        self.i = 0  # Index register
        self.pc = PROGRAM_ORIGIN
        self.stack = Stack()
        self.framebuffer = Framebuffer(allow_wrapping=allow_wrapping)
        self.timers = Timers()
        self.key_wait = None  # Key held down while Fx0A waits for its release

    @property
    def sp(self):
        return self.stack.pointer

    def copy(self):
        state = MachineState.__new__(MachineState)
        state.ram = self.ram.copy()
        state.v = memoryview(bytearray(self.v))
        state.i = self.i
        state.pc = self.pc
        state.stack = self.stack.copy()
        state.framebuffer = self.framebuffer.copy()
        state.timers = self.timers.copy()
        state.key_wait = self.key_wait
        return state
