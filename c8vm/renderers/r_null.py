#!/usr/bin/env python3

"""
Null Renderer Plugin

This serves as a base class for other rendering plugins.

This module can be used on its own as a Renderer plugin if you only want to see
debug output, or to run a ROM headless.  It keeps the most recent display
snapshot, so tests can check what would have been drawn.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RendererError(Exception):
    pass


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.last_snapshot = None
        self.frames_drawn = 0
        self.set_resolution(0, 0)

    def set_resolution(self, width, height):
        self.width = width
        self.height = height

    def draw(self, snapshot):
        # Takes one tuple of booleans per row, as returned by the interpreter
        self.last_snapshot = snapshot
        self.frames_drawn += 1

    def refresh_display(self, content_changed=False):
        pass

    def set_title(self, title):
        pass

    def shutdown(self):
        pass
