#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Applies exactly one decoded instruction to a MachineState.  The CPU keeps no
machine state of its own, only its quirk settings and random number source,
so it can be pointed at any number of machines.

Every instruction handler takes the state, the decoded instruction and the
current keypad, and returns True if the display changed.  Anything the decoder
could not name ends up in _opcode_unsupported, which halts the machine rather
than skipping the word and losing program counter alignment.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import Random
from .constants import FONT_GLYPH_SIZE, FONT_LOCATION, MEM_TOP, NUM_KEYS
from .decoder import Op
from .faults import MachineFault
from .ram import RAMError

# Every handler shares one signature, whether or not it needs the keypad
# pylint: disable=unused-argument


class CPUError(MachineFault):
    pass


class CPU:
    def __init__(self, rng=None, shift_quirks=None, load_quirks=None, logic_quirks=None, jump_quirks=None):
        self.rng = Random() if rng is None else rng

        """
        Quirks
        ------

        - Shift quirks: Disabled.  If enabled, SHR/SHL shift Vx in place and ignore Vy.
        - Load quirks : Enabled.  LD [I]/LD Vx, [I] leave I pointing past the last register copied.
        - Logic quirks: Enabled.  OR/AND/XOR (and LD Vx, Vy) reset Vf to 0.
        - Jump quirks : Disabled.  If enabled, JP V0, addr uses Vx (taken from the address' top nibble).
        """

        self.shift_quirks = False if shift_quirks is None else shift_quirks
        self.load_quirks = True if load_quirks is None else load_quirks
        self.logic_quirks = True if logic_quirks is None else logic_quirks
        self.jump_quirks = False if jump_quirks is None else jump_quirks

        self.instructions = {
            Op.UNKNOWN: self._opcode_unsupported,
            Op.NOP: self._0000,
            Op.CLS: self._00E0,
            Op.RET: self._00EE,
            Op.JP: self._1nnn,
            Op.CALL: self._2nnn,
            Op.SE_BYTE: self._3xkk,
            Op.SNE_BYTE: self._4xkk,
            Op.SE_REG: self._5xy0,
            Op.LD_BYTE: self._6xkk,
            Op.ADD_BYTE: self._7xkk,
            Op.LD_REG: self._8xy0,
            Op.OR: self._8xy1,
            Op.AND: self._8xy2,
            Op.XOR: self._8xy3,
            Op.ADD_REG: self._8xy4,
            Op.SUB: self._8xy5,
            Op.SHR: self._8xy6,
            Op.SUBN: self._8xy7,
            Op.SHL: self._8xyE,
            Op.SNE_REG: self._9xy0,
            Op.LD_I: self._Annn,
            Op.JP_V0: self._Bnnn,
            Op.RND: self._Cxkk,
            Op.DRW: self._Dxyn,
            Op.SKP: self._Ex9E,
            Op.SKNP: self._ExA1,
            Op.LD_VX_DT: self._Fx07,
            Op.LD_VX_K: self._Fx0A,
            Op.LD_DT_VX: self._Fx15,
            Op.LD_ST_VX: self._Fx18,
            Op.ADD_I: self._Fx1E,
            Op.LD_F: self._Fx29,
            Op.LD_B: self._Fx33,
            Op.LD_MEM_VX: self._Fx55,
            Op.LD_VX_MEM: self._Fx65
        }

    def execute(self, state, instruction, keys):
        # Returns True only if the display changed
        return bool(self.instructions[instruction.op](state, instruction, keys))

    def _opcode_unsupported(self, state, ins, keys):
        raise CPUError("Unrecognised instruction 0x{:04x}".format(ins.word))

    def _post_skip(self, state):
        state.pc += 2

    def _0000(self, state, ins, keys):  # NOP
        pass

    def _00E0(self, state, ins, keys):  # CLS
        state.framebuffer.clear()
        return True

    def _00EE(self, state, ins, keys):  # RET
        state.pc = state.stack.pop()

    def _1nnn(self, state, ins, keys):  # JP addr
        state.pc = ins.nnn

    def _2nnn(self, state, ins, keys):  # CALL addr
        state.stack.push(state.pc)
        state.pc = ins.nnn

    def _3xkk(self, state, ins, keys):  # SE Vx, byte
        if state.v[ins.x] == ins.kk:
            self._post_skip(state)

    def _4xkk(self, state, ins, keys):  # SNE Vx, byte
        if state.v[ins.x] != ins.kk:
            self._post_skip(state)

    def _5xy0(self, state, ins, keys):  # SE Vx, Vy
        if state.v[ins.x] == state.v[ins.y]:
            self._post_skip(state)

    def _6xkk(self, state, ins, keys):  # LD Vx, byte
        state.v[ins.x] = ins.kk

    def _7xkk(self, state, ins, keys):  # ADD Vx, byte
        # Wraps without touching Vf
        state.v[ins.x] = (state.v[ins.x] + ins.kk) & 0xFF

    def _post_8xy0_8xy1_8xy2_8xy3(self, state):
        if self.logic_quirks:
            state.v[0xF] = 0

    def _8xy0(self, state, ins, keys):  # LD Vx, Vy
        state.v[ins.x] = state.v[ins.y]
        self._post_8xy0_8xy1_8xy2_8xy3(state)

    def _8xy1(self, state, ins, keys):  # OR Vx, Vy
        state.v[ins.x] |= state.v[ins.y]
        self._post_8xy0_8xy1_8xy2_8xy3(state)

    def _8xy2(self, state, ins, keys):  # AND Vx, Vy
        state.v[ins.x] &= state.v[ins.y]
        self._post_8xy0_8xy1_8xy2_8xy3(state)

    def _8xy3(self, state, ins, keys):  # XOR Vx, Vy
        state.v[ins.x] ^= state.v[ins.y]
        self._post_8xy0_8xy1_8xy2_8xy3(state)

    def _8xy4(self, state, ins, keys):  # ADD Vx, Vy
        val = state.v[ins.x] + state.v[ins.y]
        state.v[ins.x] = val & 0xFF
        state.v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, state, ins, val):  # Post-SUB/SUBN
        state.v[ins.x] = val & 0xFF
        # Vf is set when NOT borrowing, and this must happen AFTER Vx is set, as Vf may be the target register
        state.v[0xF] = int(val >= 0)

    def _8xy5(self, state, ins, keys):  # SUB Vx, Vy
        self._post_8xy5_8xy7(state, ins, state.v[ins.x] - state.v[ins.y])

    def _8xy6(self, state, ins, keys):  # SHR Vx {, Vy}
        val = state.v[ins.x if self.shift_quirks else ins.y]
        state.v[ins.x] = val >> 1
        state.v[0xF] = val & 1

    def _8xy7(self, state, ins, keys):  # SUBN Vx, Vy
        self._post_8xy5_8xy7(state, ins, state.v[ins.y] - state.v[ins.x])

    def _8xyE(self, state, ins, keys):  # SHL Vx {, Vy}
        val = state.v[ins.x if self.shift_quirks else ins.y]
        state.v[ins.x] = (val << 1) & 0xFF
        state.v[0xF] = val >> 7

    def _9xy0(self, state, ins, keys):  # SNE Vx, Vy
        if state.v[ins.x] != state.v[ins.y]:
            self._post_skip(state)

    def _Annn(self, state, ins, keys):  # LD I, addr
        state.i = ins.nnn

    def _Bnnn(self, state, ins, keys):  # JP V0, addr
        target = state.v[ins.x if self.jump_quirks else 0] + ins.nnn

        if target > MEM_TOP:
            raise RAMError("Jump target 0x{:04x} is beyond the end of memory".format(target))

        state.pc = target

    def _Cxkk(self, state, ins, keys):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        state.v[ins.x] = self.rng.randint(0, 0xFF) & ins.kk

    def _Dxyn(self, state, ins, keys):  # DRW Vx, Vy, nibble
        framebuffer = state.framebuffer
        vid_width, vid_height = framebuffer.get_vid_size()

        # The sprite's start always wraps.  Whatever reaches past the edges is clipped, unless wrapping is enabled.
        vx_pos = state.v[ins.x] % vid_width
        vy_pos = state.v[ins.y] % vid_height
        state.v[0xF] = 0
        collided = False

        if ins.n:
            sprite = state.ram.read_block(state.i, ins.n)

            for y, spr_data in enumerate(sprite):
                for x in range(8):
                    if spr_data & (0x80 >> x) and framebuffer.xor_pixel(vx_pos + x, vy_pos + y):
                        # Don't stop drawing.  Just remember the collision.
                        collided = True

        state.v[0xF] = int(collided)
        return True

    def _Ex9E(self, state, ins, keys):  # SKP Vx
        if keys[state.v[ins.x] % NUM_KEYS]:
            self._post_skip(state)

    def _ExA1(self, state, ins, keys):  # SKNP Vx
        if not keys[state.v[ins.x] % NUM_KEYS]:
            self._post_skip(state)

    def _Fx07(self, state, ins, keys):  # LD Vx, DT
        state.v[ins.x] = state.timers.dt

    def _Fx0A(self, state, ins, keys):  # LD Vx, K
        # Waits for a key to be pressed and released.  Rather than blocking, the program counter is wound back so this
        # instruction runs again on the next cycle, leaving the host free to keep ticking timers and rendering.
        key = state.key_wait

        if key is None:
            state.key_wait = next((key_num for key_num in range(NUM_KEYS) if keys[key_num]), None)
            state.pc -= 2
        elif keys[key]:
            state.pc -= 2  # Still held
        else:
            state.v[ins.x] = key
            state.key_wait = None

    def _Fx15(self, state, ins, keys):  # LD DT, Vx
        state.timers.set_delay(state.v[ins.x])

    def _Fx18(self, state, ins, keys):  # LD ST, Vx
        state.timers.set_sound(state.v[ins.x])

    def _Fx1E(self, state, ins, keys):  # ADD I, Vx
        state.i = (state.i + state.v[ins.x]) & 0xFFFF

    def _Fx29(self, state, ins, keys):  # LD F, Vx
        state.i = FONT_LOCATION + FONT_GLYPH_SIZE * (state.v[ins.x] & 0xF)

    def _Fx33(self, state, ins, keys):  # LD B, Vx
        val = state.v[ins.x]
        state.ram.write_block(state.i, bytes((val // 100, (val // 10) % 10, val % 10)))

    def _post_Fx55_Fx65(self, state, ins):
        if self.load_quirks:
            state.i = (state.i + ins.x + 1) & 0xFFFF

    def _Fx55(self, state, ins, keys):  # LD [I], Vx
        # Ensure with +1s that the final register is copied
        state.ram.write_block(state.i, state.v[:ins.x + 1])
        self._post_Fx55_Fx65(state, ins)

    def _Fx65(self, state, ins, keys):  # LD Vx, [I]
        state.v[:ins.x + 1] = state.ram.read_block(state.i, ins.x + 1)
        self._post_Fx55_Fx65(state, ins)
