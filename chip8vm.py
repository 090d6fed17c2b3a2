#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "0.1.0"

import sys
from argparse import ArgumentParser
from c8vm import main
from c8vm.constants import DEFAULT_CLOCK_SPEED, DEFAULT_KEYMAP, CPU_QUIRKS


def positive_int(value):
    number = int(value)

    if number <= 0:
        raise ValueError(value)

    return number


def parse_args():
    parser = ArgumentParser()
    parser.add_argument("filename", help="ROM to execute (normally ending in .ch8 or .c8)")
    parser.add_argument(
        "-c", "--clock_speed", type=positive_int,
        help="set the CPU speed in operations/second (default {})".format(DEFAULT_CLOCK_SPEED)
    )
    parser.add_argument(
        "-r", "--renderer", choices=["pygame", "null"],
        help="set the rendering, input, and audio systems (pygame by default, null runs headless)"
    )
    parser.add_argument(
        "-s", "--scale", type=int,
        help="set the window width in PyGame mode (default 512)"
    )
    parser.add_argument(
        "-m", "--mute", type=int, choices=[0, 1],
        help="mute the emulated buzzer.  0 = unmuted (default), 1 = muted"
    )
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="redefine the 16 keyscan codes for keys 0-F.  Separate each decimal with a comma"
    )
    parser.add_argument(
        "--pygame_palette",
        help="redefine the background and foreground colours in comma-separated hex, e.g. 000000,FFFFFF"
    )

    for sys_quirk in CPU_QUIRKS + ["screen_wrap"]:
        parser.add_argument(
            "--{}_quirks".format(sys_quirk), type=int, choices=[0, 1],
            help="manually disable or enable {} quirks".format(sys_quirk.replace("_", " "))
        )

    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="enable trace output of every fetch and executed instruction.  Slows CPU execution"
    )
    return parser.parse_args()  # Can call sys.exit(2) if args are incorrect


if __name__ == "__main__":
    args = vars(parse_args())
    # It is possible to start the interpreter from a GUI by calling this with a dictionary
    sys.exit(main(args))
