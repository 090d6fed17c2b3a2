#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "Chip8VM Interpreter"
APP_VERSION = "0.1.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Machine layout
MEM_SIZE = 0x1000
MEM_TOP = MEM_SIZE - 1
PROGRAM_ORIGIN = 0x200
FONT_LOCATION = 0x50
STACK_DEPTH = 16
NUM_REGISTERS = 0x10
NUM_KEYS = 0x10
VID_WIDTH = 64
VID_HEIGHT = 32

# Timers count down at 60Hz regardless of the instruction clock
TIMER_FREQ = 60.0
TIMER_INTERVAL = 1.0 / TIMER_FREQ

# Default instruction clock in operations/second
DEFAULT_CLOCK_SPEED = 700

# Default mappings for keys 0-F.  These are PyGame keyscan codes, which match ASCII on a UK QWERTY keyboard
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# CPU quirks (not including display wrapping)
CPU_QUIRKS = ["shift", "load", "logic", "jump"]

# Hexadecimal digits 0-F, 4x5 pixels each
SYSTEM_FONT = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))
FONT_GLYPH_SIZE = 5
