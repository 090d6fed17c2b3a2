#!/usr/bin/env python3

"""
Stack Emulator

The call stack lives outside system RAM, because there is no specified
location for it and nothing a program does can read it directly.  It is a
fixed array of return addresses with an explicit stack pointer.

The pointer starts at zero and is incremented before each push, so slot zero
is never written and the pointer always stays below the stack depth.  With
the default 16 slots this allows 15 nested subroutine calls, and the 16th call
overflows.  Running past either end is a fatal fault: the pointer is never
wrapped.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import STACK_DEPTH
from .faults import MachineFault


class StackError(MachineFault):
    pass


class Stack:
    def __init__(self, size=STACK_DEPTH):
        self.items = [0] * size
        self.size = size
        self.pointer = 0

    def push(self, item):
        if self.pointer + 1 >= self.size:
            raise StackError("Stack overflow")

        self.pointer += 1
        self.items[self.pointer] = item

    def pop(self):
        if self.pointer == 0:
            raise StackError("Stack underflow")

        item = self.items[self.pointer]
        self.pointer -= 1
        return item

    def get_items(self):
        # For debugging.  Oldest return address first
        return self.items[1:self.pointer + 1]

    def copy(self):
        stack = Stack(self.size)
        stack.items[:] = self.items
        stack.pointer = self.pointer
        return stack
