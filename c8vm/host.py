#!/usr/bin/env python3

"""
Host Runtime

Owns the event loop around an Interpreter: it paces step() calls to the
interpreter's clock speed, ticks the timers at 60Hz, polls the keypad and
refreshes the display at 60Hz, and switches the buzzer on and off.

Timing is done by busy-waiting on perf_counter, as sleeping is nowhere near
precise enough at hundreds of instructions a second.  If the host lags, the
timers are simply ticked late rather than caught up.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from .constants import APP_NAME, TIMER_INTERVAL, VID_HEIGHT, VID_WIDTH

DISPLAY_FREQ = 60.0  # 60Hz emulated display refresh
DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ


class Host:
    def __init__(self, interpreter, renderer, inputs, audio, clock=perf_counter):
        self.interpreter = interpreter
        self.renderer = renderer
        self.inputs = inputs
        self.audio = audio
        self.clock = clock
        self.display_changed = False

        # Performance-related vars
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0

        self.renderer.set_resolution(VID_WIDTH, VID_HEIGHT)
        self.report_perf()

    def report_perf(self, fps=0, ops=0):
        self.renderer.set_title("{} - {} FPS, {} OPS".format(APP_NAME, fps, ops))

    def refresh_display(self):
        # Render pending screen updates.  Called whenever the display refresh interval expires, or on quit.
        self.renderer.refresh_display(self.display_changed)
        self.display_changed = False

    def run(self, max_cycles=None):
        # Runs until the inputs ask to quit, or max_cycles have executed.  Returns the number of cycles executed.
        interpreter = self.interpreter
        inputs = self.inputs
        audio = self.audio
        clock = self.clock
        core_interval = interpreter.speed()
        next_display_update_time = 0
        next_timer_time = 0
        next_perf_report_time = 0
        cycles = 0

        try:
            while max_cycles is None or cycles < max_cycles:
                this_time = clock()  # Do this first for maximum precision

                # Performance counters
                if this_time >= next_perf_report_time:
                    next_perf_report_time = int(this_time) + 1.0
                    self.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                    self.perf_counter_ops = 0
                    self.perf_counter_fps = 0

                # Prevent unnecessary display rendering in excess of host frame rate
                if this_time >= next_display_update_time:
                    if inputs.process_messages():  # Process inputs at 60Hz too, to avoid slowdown
                        break

                    next_display_update_time = this_time + DISPLAY_INTERVAL
                    self.refresh_display()
                    self.perf_counter_fps += 1

                # Timers run on their own 60Hz schedule, independent of the clock speed
                if this_time >= next_timer_time:
                    next_timer_time = this_time + TIMER_INTERVAL
                    interpreter.tick_timers()

                snapshot = interpreter.step(inputs.get_keys())

                if snapshot is not None:
                    self.renderer.draw(snapshot)
                    self.display_changed = True

                audio.enable_buzzer(interpreter.buzzer_active())
                cycles += 1
                self.perf_counter_ops += 1

                # Wait for next CPU instruction.  Do this last for maximum precision (takes into account time spent on
                # this instruction)
                next_time = this_time + core_interval

                while clock() < next_time:  # Unfortunately we have to do this to get the timing right
                    pass
        finally:
            audio.enable_buzzer(False)
            self.refresh_display()

        return cycles
