#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Draws display snapshots onto an SDL window surface via PyGame.  The surface is
allocated at the emulated resolution, and then the contents are stretched (in
the correct aspect ratio using 'Nearest Neighbour' translation) to fit the
window itself.  This means we don't have to draw the same pixel multiple times.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import RendererError, Renderer as RendererBase
from ..constants import APP_NAME

DEFAULT_PALETTE = (0x222222, 0xDDDDDD)  # Background, foreground


class Renderer(RendererBase):
    def __init__(self, scale=None, pygame_palette=None, **kwargs):
        if scale is None:
            scale = 512  # Default window width if not supplied

        pygame.display.init()
        self.set_title(APP_NAME)
        self.rgb_buffer = None
        self.scaled_size = (scale, scale // 2)
        self.display_surface = pygame.display.set_mode(self.scaled_size)
        self.display_surface.set_alpha(None)
        colour_map = list(DEFAULT_PALETTE)

        # Override one or both of the colours with a user-defined palette, if necessary
        if pygame_palette is not None:
            pygame_palette_split = pygame_palette.split(",")

            if len(pygame_palette_split) > len(colour_map):
                raise RendererError("Too many palette colours defined.")

            for pygame_colour_num, pygame_colour in enumerate(pygame_palette_split):
                if len(pygame_colour) != 6:
                    raise RendererError("Palette colours must all be 6 hex digits long.")

                try:
                    colour_map[pygame_colour_num] = int(pygame_colour, 16)
                except ValueError:
                    raise RendererError("Invalid palette colour defined.") from None

        # Split compound RGB values for faster byte-based lookup later
        self.rgb_map = [bytes([i >> 16, (i >> 8) & 0xFF, i & 0xFF]) for i in colour_map]

        super().__init__(scale)

    def set_resolution(self, width, height):
        # Fill the offscreen RGB buffer with the background colour
        self.rgb_buffer = memoryview(bytearray(self.rgb_map[0] * (width * height)))  # 24-bit

        # Call superclass method so display size is known on the next refresh
        super().set_resolution(width, height)

        # Force a refresh now, in case nothing else is drawn afterwards
        self.refresh_display(True)

    def draw(self, snapshot):
        # Update RGB buffer in-place to minimise allocations and PyGame calls
        rgb_map = self.rgb_map
        rgb_buffer = self.rgb_buffer
        rgb_location = 0

        for row in snapshot:
            for pixel in row:
                rgb_buffer[rgb_location:rgb_location + 3] = rgb_map[pixel]
                rgb_location += 3

        super().draw(snapshot)

    def refresh_display(self, content_changed=False):
        if content_changed and self.rgb_buffer:
            # Blit the bytearray straight to the surface
            render_surface = pygame.image.frombuffer(self.rgb_buffer, (self.width, self.height), "RGB")
            scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
            self.display_surface.blit(scaled_win, (0, 0))
            pygame.display.flip()

    def set_title(self, title):
        pygame.display.set_caption(title)

    def shutdown(self):
        # PyGame currently segfaults if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
