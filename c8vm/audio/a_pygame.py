#!/usr/bin/env python3

"""
PyGame Audio Plugin

Plays the buzzer within PyGame / SDL.

The emulated buzzer simply has an 'on' or 'off' status.  A single cycle of a
square wave is built into an 8-bit PyGame / SDL sample at startup, and looped
for as long as the buzzer is on.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase

PLAYBACK_FREQUENCY = 44100
BUZZER_FREQUENCY = 440.0
DEFAULT_VOLUME = 0.1


class Audio(AudioBase):
    def __init__(self, frequency=BUZZER_FREQUENCY):
        pygame.mixer.pre_init(PLAYBACK_FREQUENCY, size=8, channels=1, buffer=512, allowedchanges=0)
        pygame.mixer.init()

        # One period of the square wave: high for the first half, low for the second
        period = max(2, int(PLAYBACK_FREQUENCY / frequency))
        half_period = period // 2
        wave = bytearray(b"\xFF" * half_period + b"\x00" * (period - half_period))
        self.sound = pygame.mixer.Sound(buffer=wave)
        self.sound.set_volume(DEFAULT_VOLUME)
        super().__init__()

    def enable_buzzer(self, enabled):
        # Enable or disable the buzzer, i.e. play or stop looping the sample.  If the sample is already playing, it
        # won't be restarted.

        if enabled:
            if not self.buzzer_enabled:
                self.sound.play(-1)
        else:
            if self.buzzer_enabled:
                self.sound.stop()

        super().enable_buzzer(enabled)

    def shutdown(self):
        self.sound.stop()
        pygame.mixer.quit()
        super().shutdown()
