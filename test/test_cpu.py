#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from random import Random
from c8vm.constants import FONT_LOCATION, NUM_KEYS
from c8vm.cpu import CPU, CPUError
from c8vm.decoder import decode
from c8vm.ram import RAMError
from c8vm.stack import StackError
from c8vm.state import MachineState


class TestCPU(unittest.TestCase):
    def setUp(self):
        self.state = MachineState()
        self.cpu = CPU(rng=Random(1234))
        self.keys = [False] * NUM_KEYS

    def _check_invalid_opcode_caught(self, opcode):
        self.assertRaises(CPUError, self._check_opcode, opcode)

    def test_cpu_decode_exec_fail(self):
        for i in 0x0001, 0x00E1, 0x0123, 0x5001, 0x8008, 0x800F, 0x9001, 0xE09F, 0xE0A2, 0xF000, 0xF100, 0xFFFF:
            self._check_invalid_opcode_caught(i)

    def _check_opcode(self, opcode):
        return self.cpu.execute(self.state, decode(opcode), self.keys)

    def test_cpu_0000(self):  # NOP
        self.assertFalse(self._check_opcode(0x0000))
        self.assertEqual(0x200, self.state.pc)

    def test_cpu_00e0(self):  # CLS
        self.state.framebuffer.xor_pixel(3, 4)
        self.assertTrue(self._check_opcode(0x00E0))
        self.assertFalse(any(any(row) for row in self.state.framebuffer.snapshot()))

    def test_cpu_00ee(self):  # RET
        self.state.stack.push(0xFFE)
        self.assertFalse(self._check_opcode(0x00EE))
        self.assertEqual(0xFFE, self.state.pc)
        self.assertEqual(0, self.state.sp)

    def test_cpu_00ee_underflow(self):  # RET
        self.assertRaises(StackError, self._check_opcode, 0x00EE)
        self.assertEqual(0, self.state.sp)

    def test_cpu_1nnn(self):  # JP addr
        self._check_opcode(0x1FFD)
        self.assertEqual(0xFFD, self.state.pc)

    def test_cpu_2nnn(self):  # CALL addr
        self._check_opcode(0x2FFC)
        self.assertEqual(0xFFC, self.state.pc)
        self.assertEqual(1, self.state.sp)
        self.assertEqual(0x200, self.state.stack.pop())

    def test_cpu_2nnn_overflow(self):  # CALL addr
        for _ in range(15):
            self._check_opcode(0x2300)

        self.assertEqual(15, self.state.sp)
        self.assertRaises(StackError, self._check_opcode, 0x2300)
        self.assertEqual(15, self.state.sp)

    def test_cpu_3xkk(self):  # SE Vx, byte
        self.state.v[0x2] = 0x11
        self._check_opcode(0x3212)
        self.assertEqual(0x200, self.state.pc)
        self.state.v[0x2] = 0x12
        self._check_opcode(0x3212)
        self.assertEqual(0x202, self.state.pc)

    def test_cpu_4xkk(self):  # SNE Vx, byte
        self.state.v[0x2] = 0x11
        self._check_opcode(0x4212)
        self.assertEqual(0x202, self.state.pc)
        self.state.v[0x2] = 0x12
        self._check_opcode(0x4212)
        self.assertEqual(0x202, self.state.pc)

    def test_cpu_5xy0(self):  # SE Vx, Vy
        self.state.v[0x2] = 0x11
        self.state.v[0x3] = 0x12
        self._check_opcode(0x5230)
        self.assertEqual(0x200, self.state.pc)
        self.state.v[0x3] = 0x11
        self._check_opcode(0x5230)
        self.assertEqual(0x202, self.state.pc)

    def test_cpu_6xkk(self):  # LD Vx, byte
        for x in range(0x10):
            self._check_opcode(0x6000 | x << 8 | (0xF0 + x))
            self.assertEqual(0xF0 + x, self.state.v[x])

    def test_cpu_7xkk(self):  # ADD Vx, byte
        self.state.v[0xF] = 0x7
        self._check_opcode(0x72FE)
        self.assertEqual(0xFE, self.state.v[0x2])
        self._check_opcode(0x7201)
        self.assertEqual(0xFF, self.state.v[0x2])
        self._check_opcode(0x7201)
        self.assertEqual(0x00, self.state.v[0x2])
        self.assertEqual(0x7, self.state.v[0xF])  # No carry flag

    def test_cpu_7xkk_no_flag(self):  # ADD Vx, byte
        self.state.v[0x3] = 10
        self._check_opcode(0x7305)
        self.assertEqual(15, self.state.v[0x3])
        self.assertEqual(0, self.state.v[0xF])

    def test_cpu_8xy0(self):  # LD Vx, Vy
        self.state.v[0x1] = 0x1
        self.state.v[0x2] = 0x2
        self._check_opcode(0x8120)
        self.assertEqual(0x2, self.state.v[0x1])

    def _prepare_alu(self):
        self.state.v[0x1] = 0b10111000
        self.state.v[0x2] = 0b10001110

    def test_cpu_8xy1(self):  # OR Vx, Vy
        self._prepare_alu()
        self._check_opcode(0x8121)
        self.assertEqual(0b10111110, self.state.v[0x1])

    def test_cpu_8xy2(self):  # AND Vx, Vy
        self._prepare_alu()
        self._check_opcode(0x8122)
        self.assertEqual(0b10001000, self.state.v[0x1])

    def test_cpu_8xy3(self):  # XOR Vx, Vy
        self._prepare_alu()
        self._check_opcode(0x8123)
        self.assertEqual(0b00110110, self.state.v[0x1])

    def test_cpu_8xy4_carry(self):  # ADD Vx, Vy (carry)
        self._prepare_alu()
        self._check_opcode(0x8124)
        self.assertEqual(0b01000110, self.state.v[0x1])
        self.assertEqual(0x1, self.state.v[0xF])

    def test_cpu_8xy4_no_carry(self):  # ADD Vx, Vy (no carry)
        self.state.v[0x1] = 0x1
        self.state.v[0xF] = 0x2  # Use Vf as an input to check flag ordering too
        self._check_opcode(0x81F4)
        self.assertEqual(0x3, self.state.v[0x1])
        self.assertEqual(0x0, self.state.v[0xF])

    def test_cpu_8xy4_flag_target(self):  # ADD Vf, Vy
        self.state.v[0xF] = 0xFF
        self.state.v[0x1] = 0x2
        self._check_opcode(0x8F14)
        self.assertEqual(0x1, self.state.v[0xF])  # The flag wins over the sum

    def test_cpu_8xy5_no_borrow(self):  # SUB Vx, Vy (no borrow)
        self.state.v[0x1] = 0x3
        self.state.v[0x2] = 0x1
        self._check_opcode(0x8125)
        self.assertEqual(0x2, self.state.v[0x1])
        self.assertEqual(0x1, self.state.v[0xF])
        self.state.v[0x1] = 0xFF
        self.state.v[0xF] = 0xFF
        self._check_opcode(0x81F5)
        self.assertEqual(0x0, self.state.v[0x1])
        self.assertEqual(0x1, self.state.v[0xF])

    def test_cpu_8xy5_borrow(self):  # SUB Vx, Vy (borrow)
        self.state.v[0x1] = 0x1
        self.state.v[0x2] = 0x2
        self._check_opcode(0x8125)
        self.assertEqual(0xFF, self.state.v[0x1])
        self.assertEqual(0x0, self.state.v[0xF])

    def test_cpu_8xy6(self):  # SHR Vx {, Vy}
        self.state.v[0x1] = 0x4
        self.state.v[0x2] = 0x3
        self._check_opcode(0x8126)
        self.assertEqual(0x1, self.state.v[0x1])
        self.assertEqual(0x3, self.state.v[0x2])
        self.assertEqual(0x1, self.state.v[0xF])

    def test_cpu_8xy6_shift_quirks(self):  # SHR Vx
        self.cpu.shift_quirks = True
        self.state.v[0x1] = 0x4
        self.state.v[0x2] = 0x3
        self._check_opcode(0x8126)
        self.assertEqual(0x2, self.state.v[0x1])
        self.assertEqual(0x0, self.state.v[0xF])

    def test_cpu_8xy7(self):  # SUBN Vx, Vy
        self.state.v[0x1] = 0x4
        self.state.v[0x2] = 0x2
        self._check_opcode(0x8127)
        self.assertEqual(0xFE, self.state.v[0x1])
        self.assertEqual(0x2, self.state.v[0x2])
        self.assertEqual(0x0, self.state.v[0xF])
        self.state.v[0x1] = 0x2
        self.state.v[0x2] = 0x4
        self._check_opcode(0x8127)
        self.assertEqual(0x2, self.state.v[0x1])
        self.assertEqual(0x1, self.state.v[0xF])

    def test_cpu_8xye_carry(self):  # SHL Vx {, Vy}
        self.state.v[0x1] = 0x4
        self.state.v[0x2] = 0x81
        self._check_opcode(0x812E)
        self.assertEqual(0x2, self.state.v[0x1])
        self.assertEqual(0x81, self.state.v[0x2])
        self.assertEqual(0x1, self.state.v[0xF])

    def test_cpu_8xye_no_carry(self):  # SHL Vx {, Vy}
        self.state.v[0x1] = 0xFE
        self.state.v[0x4] = 0x1
        self._check_opcode(0x814E)
        self.assertEqual(0x2, self.state.v[0x1])
        self.assertEqual(0x1, self.state.v[0x4])
        self.assertEqual(0x0, self.state.v[0xF])

    def test_cpu_9xy0(self):  # SNE Vx, Vy
        self.state.v[0x2] = 0x15
        self.state.v[0x3] = 0x16
        self._check_opcode(0x9230)
        self.assertEqual(0x202, self.state.pc)
        self.state.v[0x3] = 0x15
        self._check_opcode(0x9230)
        self.assertEqual(0x202, self.state.pc)

    def test_cpu_annn(self):  # LD I, addr
        self.assertEqual(0, self.state.i)
        self._check_opcode(0xAFF1)
        self.assertEqual(0xFF1, self.state.i)

    def test_cpu_bnnn(self):  # JP V0, addr
        self._check_opcode(0xB002)
        self.assertEqual(0x2, self.state.pc)
        self.state.v[0x0] = 0x1
        self._check_opcode(0xB102)
        self.assertEqual(0x103, self.state.pc)

    def test_cpu_bnnn_out_of_range(self):  # JP V0, addr
        self.state.v[0x0] = 0xFD
        self.assertRaises(RAMError, self._check_opcode, 0xBF0E)
        self.assertEqual(0x200, self.state.pc)

    def test_cpu_bnnn_jump_quirks(self):  # JP Vx, addr
        self.cpu.jump_quirks = True
        self.state.v[0x0] = 0x10
        self.state.v[0x3] = 0x20
        self._check_opcode(0xB300)
        self.assertEqual(0x320, self.state.pc)

    def test_cpu_cxkk(self):  # RND Vx, byte
        for _ in range(20):
            self._check_opcode(0xC10F)
            self.assertEqual(0, self.state.v[0x1] & 0xF0)

        self._check_opcode(0xC100)
        self.assertEqual(0, self.state.v[0x1])

    def _prepare_sprite(self):
        # Two rows: 0b11000000, 0b10000001
        self.state.i = 0x300
        self.state.ram.write_block(0x300, bytearray(b"\xC0\x81"))

    def test_cpu_dxyn(self):  # DRW Vx, Vy, nibble
        self._prepare_sprite()
        self.state.v[0x2] = 10
        self.state.v[0x3] = 5
        self.assertTrue(self._check_opcode(0xD232))
        framebuffer = self.state.framebuffer
        self.assertTrue(framebuffer.is_on(10, 5))
        self.assertTrue(framebuffer.is_on(11, 5))
        self.assertFalse(framebuffer.is_on(12, 5))
        self.assertTrue(framebuffer.is_on(10, 6))
        self.assertTrue(framebuffer.is_on(17, 6))
        self.assertEqual(0, self.state.v[0xF])

    def test_cpu_dxyn_collision(self):  # DRW Vx, Vy, nibble
        self._prepare_sprite()
        before = self.state.framebuffer.snapshot()
        self._check_opcode(0xD232)
        self.assertEqual(0, self.state.v[0xF])
        self._check_opcode(0xD232)
        self.assertEqual(1, self.state.v[0xF])
        self.assertEqual(before, self.state.framebuffer.snapshot())

    def test_cpu_dxyn_flag_cleared(self):  # DRW Vx, Vy, nibble
        self._prepare_sprite()
        self.state.v[0xF] = 0x5
        self._check_opcode(0xD012)
        self.assertEqual(0, self.state.v[0xF])

    def test_cpu_dxyn_start_wraps(self):  # DRW Vx, Vy, nibble
        self._prepare_sprite()
        self.state.v[0x0] = 64 + 1
        self.state.v[0x1] = 32 + 2
        self._check_opcode(0xD012)
        self.assertTrue(self.state.framebuffer.is_on(1, 2))

    def test_cpu_dxyn_clipped(self):  # DRW Vx, Vy, nibble
        self._prepare_sprite()
        self.state.v[0x0] = 63
        self.state.v[0x1] = 31
        self._check_opcode(0xD012)
        framebuffer = self.state.framebuffer
        self.assertTrue(framebuffer.is_on(63, 31))
        self.assertFalse(framebuffer.is_on(0, 31))
        self.assertFalse(framebuffer.is_on(0, 0))
        self.assertFalse(framebuffer.is_on(63, 0))

    def test_cpu_dxyn_wrapped(self):  # DRW Vx, Vy, nibble
        self.state = MachineState(allow_wrapping=True)
        self._prepare_sprite()
        self.state.v[0x0] = 63
        self.state.v[0x1] = 31
        self._check_opcode(0xD012)
        framebuffer = self.state.framebuffer
        self.assertTrue(framebuffer.is_on(63, 31))
        self.assertTrue(framebuffer.is_on(0, 31))
        self.assertTrue(framebuffer.is_on(63, 0))
        self.assertTrue(framebuffer.is_on(6, 0))

    def test_cpu_dxyn_out_of_range(self):  # DRW Vx, Vy, nibble
        self.state.i = 0xFFE
        self.assertRaises(RAMError, self._check_opcode, 0xD013)

    def test_cpu_ex9e(self):  # SKP Vx
        self.state.v[0x1] = 0xA
        self._check_opcode(0xE19E)
        self.assertEqual(0x200, self.state.pc)
        self.keys[0xA] = True
        self._check_opcode(0xE19E)
        self.assertEqual(0x202, self.state.pc)

    def test_cpu_exa1(self):  # SKNP Vx
        self.state.v[0x1] = 0xA
        self._check_opcode(0xE1A1)
        self.assertEqual(0x202, self.state.pc)
        self.keys[0xA] = True
        self._check_opcode(0xE1A1)
        self.assertEqual(0x202, self.state.pc)

    def test_cpu_fx07(self):  # LD Vx, DT
        self.assertEqual(0x0, self.state.v[0x2])
        self.state.timers.dt = 0x2
        self._check_opcode(0xF207)
        self.assertEqual(0x2, self.state.v[0x2])

    def test_cpu_fx0a(self):  # LD Vx, K
        self.state.pc = 0x202  # As if just fetched from 0x200
        self._check_opcode(0xF30A)
        self.assertEqual(0x200, self.state.pc)
        self.assertIsNone(self.state.key_wait)

        # Press key 7 -- still waiting for the release
        self.state.pc = 0x202
        self.keys[0x7] = True
        self._check_opcode(0xF30A)
        self.assertEqual(0x200, self.state.pc)
        self.assertEqual(0x7, self.state.key_wait)

        self.state.pc = 0x202
        self._check_opcode(0xF30A)
        self.assertEqual(0x200, self.state.pc)

        # Release key 7
        self.state.pc = 0x202
        self.keys[0x7] = False
        self._check_opcode(0xF30A)
        self.assertEqual(0x202, self.state.pc)
        self.assertEqual(0x7, self.state.v[0x3])
        self.assertIsNone(self.state.key_wait)

    def test_cpu_fx15(self):  # LD DT, Vx
        self.assertEqual(0x0, self.state.timers.dt)
        self.state.v[0x2] = 0x3
        self._check_opcode(0xF215)
        self.assertEqual(0x3, self.state.timers.dt)

    def test_cpu_fx18(self):  # LD ST, Vx
        self.assertEqual(0x0, self.state.timers.ds)
        self.state.v[0x3] = 0x4
        self._check_opcode(0xF318)
        self.assertEqual(0x4, self.state.timers.ds)
        self.assertTrue(self.state.timers.buzzer_active())

    def test_cpu_fx1e_no_overflow(self):  # ADD I, Vx
        self.state.v[0x1] = 0x2
        self.state.i = 0x3
        self._check_opcode(0xF11E)
        self.assertEqual(0x5, self.state.i)
        self.assertEqual(0x0, self.state.v[0xF])

    def test_cpu_fx1e_overflow(self):  # ADD I, Vx
        self.state.v[0x3] = 0xFE
        self.state.i = 0xFFFE
        self._check_opcode(0xF31E)
        self.assertEqual(0xFC, self.state.i)
        self.assertEqual(0x0, self.state.v[0xF])

    def test_cpu_fx29(self):  # LD F, Vx
        self.state.v[0x1] = 0x9
        self._check_opcode(0xF129)
        self.assertEqual(0x7D, self.state.i)
        self.assertEqual(FONT_LOCATION + 45, self.state.i)
        self.assertEqual(0xF0, self.state.ram.read(self.state.i))

    def test_cpu_fx33(self):  # LD B, Vx
        self.state.i = 0x300
        self.state.v[0x1] = 0xFE
        self._check_opcode(0xF133)
        # Ensure 254 (base 10 of 0xFE) is calculated
        self.assertEqual(0x2, self.state.ram.read(0x300))
        self.assertEqual(0x5, self.state.ram.read(0x301))
        self.assertEqual(0x4, self.state.ram.read(0x302))

    def test_cpu_fx33_out_of_range(self):  # LD B, Vx
        self.state.i = 0xFFE
        self.state.v[0x2] = 0xFD
        self.assertRaises(RAMError, self._check_opcode, 0xF233)
        # Nothing is written if any digit would not fit
        self.assertEqual(0x0, self.state.ram.read(0xFFE))

    def test_cpu_fx55(self):  # LD [I], Vx
        self.state.v[0x0] = 3
        self.state.v[0x1] = 2
        self.state.v[0x2] = 1  # Shouldn't be written into RAM @ 0x302
        self.state.i = 0x300
        self._check_opcode(0xF155)
        self.assertEqual(0x3, self.state.ram.read(0x300))
        self.assertEqual(0x2, self.state.ram.read(0x301))
        self.assertEqual(0x0, self.state.ram.read(0x302))
        self.assertEqual(0x302, self.state.i)

    def test_cpu_fx65(self):  # LD Vx, [I]
        self.state.i = 0x300
        self.state.ram.write_block(0x300, bytearray(b"\x06\x05\x04"))  # 0x04 shouldn't be copied to register V2
        self._check_opcode(0xF165)
        self.assertEqual(0x6, self.state.v[0])
        self.assertEqual(0x5, self.state.v[1])
        self.assertEqual(0x0, self.state.v[2])
        self.assertEqual(0x302, self.state.i)

    def test_cpu_fx55_fx65_out_of_range(self):
        self.state.i = 0xFFF
        self.assertRaises(RAMError, self._check_opcode, 0xF155)
        self.assertRaises(RAMError, self._check_opcode, 0xF165)

    def test_cpu_load_quirks(self):
        self.cpu.load_quirks = False
        self.state.i = 0x300
        self._check_opcode(0xF355)
        self.assertEqual(0x300, self.state.i)
        self._check_opcode(0xF365)
        self.assertEqual(0x300, self.state.i)

    def test_cpu_logic_quirks(self):
        for logic_quirks in False, True:
            self.state.v[0xF] = 0x2
            self.cpu.logic_quirks = logic_quirks

            for i in range(4):
                self._check_opcode(0x8120 + i)
                self.assertEqual(int(not logic_quirks) * 2, self.state.v[0xF])
