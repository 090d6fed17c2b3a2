#!/usr/bin/env python3

"""
RAM Emulator

Supports reading and writing of blocks of memory or individual bytes.  Every
access is checked against the top of memory: running off the end of the
address space is a machine fault rather than a wraparound.

The same class backs the framebuffer, where each byte holds one pixel.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MEM_SIZE
from .faults import MachineFault

CPU_ENDIAN = "big"  # CHIP-8 is big-endian


class RAMError(MachineFault):
    pass


class RAM:
    def __init__(self, mem_size=MEM_SIZE):
        self.resize(mem_size)

    def resize(self, mem_size):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size

    def read(self, location):
        self.check_overflow(location)
        return self.mem[location]

    def read_block(self, location, size=1):
        self.check_overflow(location + size - 1)
        return self.mem[location:location + size]

    def read_word(self, location):
        return int.from_bytes(self.read_block(location, 2), CPU_ENDIAN, signed=False)

    def write(self, location, byte):
        self.check_overflow(location)
        self.mem[location] = byte

    def write_block(self, location, block):
        block_size = len(block)
        block_top = location + block_size
        self.check_overflow(block_top - 1)
        self.mem[location:block_top] = block

    def check_overflow(self, location):
        if location > self.mem_top or location < 0:
            raise RAMError("Memory access out of range at 0x{:04x}".format(location))

    def fits(self, location, size):
        return location + size <= self.mem_size

    def zero_block(self, offset, size):
        block_top = offset + size
        self.check_overflow(block_top - 1)
        self.mem[offset:block_top] = bytes(size)

    def clear(self):
        self.zero_block(0, self.mem_size)

    def copy(self):
        ram = RAM(self.mem_size)
        ram.mem[:] = self.mem
        return ram
