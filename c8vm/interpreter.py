#!/usr/bin/env python3

"""
Cycle Driver

The host owns the event loop and calls step() once per cycle.  Each cycle
fetches the big-endian word at the program counter, advances the counter by
two, decodes the word and hands it to the CPU.  A cycle is atomic: nothing in
here sleeps, waits or touches the host.

The host is also responsible for pacing.  speed() gives the delay between
step() calls for the requested clock rate, and tick_timers() must be called at
60Hz on its own schedule, since the instruction rate and timer rate differ.

Any MachineFault raised during a cycle halts the interpreter.  The fault is
tagged with the failing opcode and address (plus a register dump) and
re-raised, and every later step() raises it again.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_KEYS, PROGRAM_ORIGIN
from .cpu import CPU
from .debugger import Debugger
from .decoder import decode
from .faults import MachineFault
from .hostio import Loader
from .state import MachineState


class LoadError(Exception):
    pass


class Interpreter:
    def __init__(self, clock_frequency, rng=None, debugger=None, loader=None, screen_wrap_quirks=None, **cpu_quirks):
        if clock_frequency <= 0:
            raise ValueError("Clock frequency must be a positive number of cycles per second")

        self.clock_speed = clock_frequency
        self.core_interval = 1.0 / clock_frequency
        self.state = MachineState(allow_wrapping=bool(screen_wrap_quirks))
        self.cpu = CPU(rng=rng, **cpu_quirks)
        self.debugger = Debugger() if debugger is None else debugger
        self.live_debug = self.debugger.is_live()
        self.loader = Loader() if loader is None else loader
        self.fault = None

    def load(self, data):
        # Either the whole program is copied or nothing is.  Accepts any sequence of byte values.
        ram = self.state.ram

        if isinstance(data, int):
            raise LoadError("Program is not a sequence of byte values: got a single int")

        try:
            data = bytes(data)
        except (TypeError, ValueError) as err:
            raise LoadError("Program is not a sequence of byte values: {}".format(err)) from err

        if not ram.fits(PROGRAM_ORIGIN, len(data)):
            raise LoadError(
                "Program is {} bytes, but only {} bytes fit above address 0x{:03x}".format(
                    len(data), ram.mem_size - PROGRAM_ORIGIN, PROGRAM_ORIGIN
                )
            )

        ram.write_block(PROGRAM_ORIGIN, data)
        return self

    def load_file(self, filename):
        try:
            data = self.loader.load_binary(filename)
        except OSError as err:
            raise LoadError("Unable to read ROM '{}': {}".format(filename, err.strerror or err)) from err

        return self.load(data)

    def step(self, keys):
        # Returns a display snapshot if the display changed this cycle, otherwise None
        if self.fault is not None:
            raise self.fault

        if len(keys) != NUM_KEYS:
            raise ValueError("Expected {} key states, got {}".format(NUM_KEYS, len(keys)))

        state = self.state
        address = state.pc
        word = None
        instruction = None

        try:
            word = state.ram.read_word(address)
            state.pc = address + 2  # Program counter updates after fetch, but before execute

            if self.live_debug:
                self.debugger.fetched(address, word)

            instruction = decode(word)

            if self.live_debug:
                self.debugger.output(state, address, instruction)

            display_changed = self.cpu.execute(state, instruction, keys)
        except MachineFault as fault:
            debug_info = None if instruction is None else self.debugger.debug(state, address, instruction, verbose=True)
            fault.locate(word, address, debug_info)
            self.fault = fault
            raise

        return state.framebuffer.snapshot() if display_changed else None

    def speed(self):
        # Seconds the host should wait between calls to step()
        return self.core_interval

    def buzzer_active(self):
        return self.state.timers.buzzer_active()

    def tick_timers(self):
        # Call at 60Hz, independently of step()
        self.state.timers.tick()

    def display(self):
        return self.state.framebuffer.snapshot()
