#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the interpreter, replacing args with a
dictionary of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.

The interpreter core (Interpreter and everything it uses) never imports any
of the host plugins, so it can be embedded in another event loop without
PyGame installed.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from .constants import APP_INTRO, APP_COPYRIGHT, CPU_QUIRKS, DEFAULT_CLOCK_SPEED
from .faults import MachineFault
from .host import Host
from .interpreter import Interpreter, LoadError

logger = logging.getLogger("c8vm")


class StartupError(Exception):
    pass


def main(args):
    logging.basicConfig(level=logging.DEBUG if args["debug"] else logging.INFO, format="%(message)s")
    logger.info("".join((APP_INTRO, APP_COPYRIGHT)))
    quirk_settings = {}

    for sys_quirk in CPU_QUIRKS + ["screen_wrap"]:
        quirk_label = "{}_quirks".format(sys_quirk)
        quirk_setting = args[quirk_label]
        quirk_settings[quirk_label] = None if quirk_setting is None else bool(quirk_setting)

    opt_renderer = args["renderer"] or "pygame"
    mute_audio = args["mute"]

    # flake8: noqa: F401
    if opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            raise StartupError(
                "PyGame does not appear to be installed.  Install it, or use the null renderer to run headless."
            )
        else:
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer

            if mute_audio:
                from .audio.a_null import Audio
            else:
                from .audio.a_pygame import Audio
    else:
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        from .audio.a_null import Audio

    clock_speed = args["clock_speed"]
    interpreter = Interpreter(DEFAULT_CLOCK_SPEED if clock_speed is None else clock_speed, **quirk_settings)

    # Read ROM binary and write it into RAM.  A missing or oversized ROM stops startup here.
    try:
        interpreter.load_file(args["filename"])
    except LoadError as err:
        logger.error("%s", err)
        return 1

    renderer = Renderer(scale=args["scale"], pygame_palette=args["pygame_palette"])
    inputs = Inputs(args["keymap"], renderer)
    audio = Audio()
    host = Host(interpreter, renderer, inputs, audio)

    try:
        host.run()
    except MachineFault as fault:
        logger.critical("Emulation halted.\n\n%s", fault)
        return 1
    finally:
        # The interpreter has stopped, so shut down the rendering framework.  __del__ cannot be relied upon when using
        # PyPy
        audio.shutdown()
        inputs.shutdown()
        renderer.shutdown()

    return 0
