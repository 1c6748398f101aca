"""Tests for ALU operations (8xxx)."""

import pytest
from chipjax import execute
from conftest import set_registers


class TestBasicALU:
    """Test basic ALU operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99)

        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99

    def test_alu_set_leaves_vf(self, fresh_state):
        """8XY0 - Copy does not touch VF."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99, VF=0x07)

        state = execute(state, 0x8120)

        assert state.V[15] == 0x07

    def test_alu_set_into_vf(self, fresh_state):
        """8FY0 - Copying into VF keeps the copied value."""
        state = set_registers(fresh_state, V2=0x99)

        state = execute(state, 0x8F20)

        assert state.V[15] == 0x99

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0x0F, VF=1)

        state = execute(state, 0x8121)  # V1 |= V2

        assert state.V[1] == 0xFF
        assert state.V[15] == 0

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0xF1, VF=1)

        state = execute(state, 0x8122)  # V1 &= V2

        assert state.V[1] == 0xF0
        assert state.V[15] == 0

    def test_alu_xor_basic(self, fresh_state):
        """8XY3 - XOR operation."""
        state = set_registers(fresh_state, V1=0xFF, V2=0xF0, VF=1)

        state = execute(state, 0x8123)  # V1 ^= V2

        assert state.V[1] == 0x0F
        assert state.V[15] == 0

    def test_alu_xor_same(self, fresh_state):
        """8XY3 - XOR with same value should be 0."""
        state = set_registers(fresh_state, V3=0xAA, V4=0xAA)

        state = execute(state, 0x8343)  # V3 ^= V4

        assert state.V[3] == 0x00
        assert state.V[15] == 0

    def test_logic_keeps_vf_in_modern_mode(self, modern_state):
        """8XY1 - Without the VF reset quirk the flag survives."""
        state = set_registers(modern_state, V1=0xF0, V2=0x0F, VF=1)

        state = execute(state, 0x8121)

        assert state.V[1] == 0xFF
        assert state.V[15] == 1


class TestALUArithmetic:
    """Test arithmetic ALU operations."""

    def test_alu_add_no_carry(self, fresh_state):
        """8XY4 - Add without carry."""
        state = set_registers(fresh_state, V1=0x10, V2=0x20)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x30
        assert state.V[15] == 0

    def test_alu_add_with_carry(self, fresh_state):
        """8XY4 - Add with carry."""
        state = set_registers(fresh_state, V1=0xFF, V2=0x01)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x00  # 256 wraps to 0
        assert state.V[15] == 1

    def test_alu_add_exactly_255(self, fresh_state):
        """8XY4 - A sum of exactly 255 does not carry."""
        state = set_registers(fresh_state, V1=0xF0, V2=0x0F, VF=1)

        state = execute(state, 0x8124)

        assert state.V[1] == 0xFF
        assert state.V[15] == 0

    @pytest.mark.parametrize("vx,vy", [(200, 100), (128, 128), (255, 255), (1, 254)])
    def test_alu_add_carry_property(self, fresh_state, vx, vy):
        """8XY4 - VF is the ninth bit of the sum."""
        state = set_registers(fresh_state, V3=vx, V4=vy)

        state = execute(state, 0x8344)

        assert state.V[3] == (vx + vy) % 256
        assert state.V[15] == (1 if vx + vy > 255 else 0)

    def test_alu_sub_xy_no_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, no borrow."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8125)  # V1 -= V2

        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_alu_sub_xy_with_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, with borrow."""
        state = set_registers(fresh_state, V3=0x10, V4=0x30)

        state = execute(state, 0x8345)  # V3 -= V4

        assert state.V[3] == 0xE0  # 16 - 48 = -32 -> 224
        assert state.V[15] == 0

    def test_alu_sub_xy_equal(self, fresh_state):
        """8XY5 - Equal operands: VF is 0 because VX is not greater than VY."""
        state = set_registers(fresh_state, V1=0x42, V2=0x42)

        state = execute(state, 0x8125)

        assert state.V[1] == 0
        assert state.V[15] == 0

    def test_alu_sub_yx_no_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, no borrow."""
        state = set_registers(fresh_state, V1=0x10, V2=0x30)

        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == 0x20  # 48 - 16 = 32
        assert state.V[15] == 1

    def test_alu_sub_yx_with_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, with borrow."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8127)

        assert state.V[1] == 0xE0
        assert state.V[15] == 0


class TestALUShifts:
    """Test shift operations with both quirk settings."""

    def test_shift_right_loads_vy(self, fresh_state):
        """8XY6 - VX = VY >> 1 by default."""
        state = set_registers(fresh_state, V5=0x08, V6=0x03)

        state = execute(state, 0x8566)

        assert state.V[5] == 0x01  # 3 >> 1
        assert state.V[6] == 0x03
        assert state.V[15] == 1  # LSB of V6

    def test_shift_right_even(self, fresh_state):
        """8XY6 - Even source leaves VF clear."""
        state = set_registers(fresh_state, V1=0xFF, V2=0x04, VF=1)

        state = execute(state, 0x8126)

        assert state.V[1] == 0x02
        assert state.V[15] == 0

    def test_shift_left_loads_vy(self, fresh_state):
        """8XYE - VX = VY << 1 by default, VF = old MSB."""
        state = set_registers(fresh_state, V3=0x00, V4=0x81)

        state = execute(state, 0x834E)

        assert state.V[3] == 0x02  # 0x81 << 1 = 0x102 -> 0x02
        assert state.V[15] == 1

    def test_shift_left_no_overflow(self, fresh_state):
        """8XYE - MSB clear leaves VF clear."""
        state = set_registers(fresh_state, V3=0x00, V4=0x41, VF=1)

        state = execute(state, 0x834E)

        assert state.V[3] == 0x82
        assert state.V[15] == 0

    def test_shift_right_in_place_modern(self, modern_state):
        """8XY6 - Modern preset shifts VX and ignores VY."""
        state = set_registers(modern_state, V3=0x05, V4=0xFF)

        state = execute(state, 0x8346)

        assert state.V[3] == 0x02
        assert state.V[15] == 1

    def test_shift_left_in_place_modern(self, modern_state):
        """8XYE - Modern preset shifts VX and ignores VY."""
        state = set_registers(modern_state, V3=0x81, V4=0x00)

        state = execute(state, 0x834E)

        assert state.V[3] == 0x02
        assert state.V[15] == 1

    def test_shift_into_vf(self, fresh_state):
        """8FY6 - When X is F the flag overwrites the result."""
        state = set_registers(fresh_state, V1=0x02)

        state = execute(state, 0x8F16)

        assert state.V[15] == 0


class TestALUEdgeCases:
    """Test edge cases and comprehensive scenarios."""

    @pytest.mark.parametrize("op", [0x8, 0x9, 0xA, 0xB, 0xC, 0xD, 0xF])
    def test_alu_undefined_operations(self, fresh_state, op):
        """Undefined ALU selectors change nothing but the unknown counter."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99, VF=0x05)

        state = execute(state, 0x8120 | op)

        assert state.V[1] == 0x42, f"Undefined op {op:X} changed VX"
        assert state.V[15] == 0x05, f"Undefined op {op:X} changed VF"
        assert state.unknown_count == 1

    def test_alu_self_operations(self, fresh_state):
        """Test operations where VX and VY are the same register."""
        state = set_registers(fresh_state, V5=0xAA)

        state = execute(state, 0x8553)  # V5 ^= V5
        assert state.V[5] == 0x00, "Self XOR should result in 0"

        state = set_registers(state, V5=0x80)
        state = execute(state, 0x8554)  # V5 += V5
        assert state.V[5] == 0x00, "Self ADD should wrap on overflow"
        assert state.V[15] == 1, "Self ADD should set carry flag"

    def test_vf_register_operations(self, fresh_state):
        """Test that operations on VF work correctly."""
        state = set_registers(fresh_state, VF=0x42, V1=0x10)

        state = execute(state, 0x81F4)  # V1 += VF
        assert state.V[1] == 0x52, "Addition with VF as source failed"
        assert state.V[15] == 0, "VF should be overwritten by operation result"
