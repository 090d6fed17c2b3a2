#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here and handed to the host as immutable snapshots, so the
host's rendering system decides when (and whether) to draw them.  The
interpreter itself never touches the screen.

Programs for this system cannot write directly into video RAM.  Instead,
sprites are drawn to the screen using an XOR method.  Collisions (where a
pixel was set, but was unset by an XOR) are reported back to the CPU.

Sprites reaching past the right or bottom edge are clipped by default.  Some
ROMs expect the overflowing part to wrap around to the opposite edge instead,
so wrapping can be enabled when the framebuffer is created.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import VID_WIDTH, VID_HEIGHT
from .ram import RAM

PIXEL_ON = 0xFF


class Framebuffer():
    def __init__(self, vid_width=VID_WIDTH, vid_height=VID_HEIGHT, allow_wrapping=False):
        self.allow_wrapping = allow_wrapping
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.plane = RAM(self.vid_size)

    def clear(self):
        self.plane.clear()

    def xor_pixel(self, x, y):
        # Returns True if an 'on' pixel was switched off, False if not, or None if the pixel was clipped

        if self.allow_wrapping:
            x %= self.vid_width
            y %= self.vid_height
        elif x >= self.vid_width or y >= self.vid_height:
            return None

        vram_loc = y * self.vid_width + x
        pixel = self.plane.read(vram_loc)
        self.plane.write(vram_loc, pixel ^ PIXEL_ON)

        return pixel != 0

    def is_on(self, x, y):
        return self.plane.read(y * self.vid_width + x) != 0

    def snapshot(self):
        # One tuple of booleans per row, top row first
        mem = self.plane.mem
        width = self.vid_width

        return tuple(
            tuple(pixel != 0 for pixel in mem[row * width:(row + 1) * width]) for row in range(self.vid_height)
        )

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def copy(self):
        framebuffer = Framebuffer(self.vid_width, self.vid_height, self.allow_wrapping)
        framebuffer.plane = self.plane.copy()
        return framebuffer
