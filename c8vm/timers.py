#!/usr/bin/env python3

"""
Delay and Sound Timers

Both timers count down towards zero at 60Hz, no matter how fast the CPU is
clocked.  They are therefore ticked on their own schedule (see
Interpreter.tick_timers), never once per instruction.  The buzzer sounds for
as long as the sound timer is above zero.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Timers:
    def __init__(self):
        self.dt = 0  # Delay timer (byte)
        self.ds = 0  # Sound timer (byte)

    def set_delay(self, value):
        self.dt = value & 0xFF

    def set_sound(self, value):
        self.ds = value & 0xFF

    def tick(self):
        if self.dt > 0:
            self.dt -= 1

        if self.ds > 0:
            self.ds -= 1

    def buzzer_active(self):
        return self.ds > 0

    def copy(self):
        timers = Timers()
        timers.dt = self.dt
        timers.ds = self.ds
        return timers
