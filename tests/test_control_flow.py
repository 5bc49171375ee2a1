"""Tests for control flow instructions."""

import pytest
from chix8 import execute, cycle, MachineFault, STACK_SIZE
from conftest import program_state


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump to NNN + V0."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0x6230)  # V2 = 0x30, ignored
        state = execute(state, 0xB250)
        assert state.pc == 0x260

    def test_jump_with_offset_wraps_to_12_bits(self, fresh_state):
        """BNNN - Target stays inside the 12-bit address space."""
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF
        state = execute(state, 0xBFF0)
        assert state.pc == (0xFF0 + 0xFF) & 0xFFF


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XKK - Should skip when VX == KK."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x42))
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XKK - Should not skip when VX != KK."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x41))
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XKK - Should skip when VX != KK."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x10))
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XKK - Should not skip when VX == KK."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x20))
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x55))
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x44))
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xAA))
        state = state.replace(V=state.V.at[8].set(0xBB))
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xCC))
        state = state.replace(V=state.V.at[8].set(0xCC))
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc

    def test_skip_with_zero_values(self, fresh_state):
        """Test skip instructions with zero values."""
        state = fresh_state
        initial_pc = state.pc

        state = execute(state, 0x3000)  # Skip if V0 == 0
        assert state.pc == initial_pc + 2

    def test_skip_boundary_values(self, fresh_state):
        """Test skip instructions with boundary values."""
        state = fresh_state.replace(V=fresh_state.V.at[0].set(0xFF))
        initial_pc = state.pc

        state = execute(state, 0x30FF)  # Skip if V0 == 255
        assert state.pc == initial_pc + 2

    def test_skip_in_running_program(self):
        """A taken skip moves past the next instruction word."""
        state = program_state([0x3000, 0x6101, 0x6202])  # V0 == 0 skips V1 = 1

        state = cycle(state)
        assert state.pc == 0x204

        state = cycle(state)
        assert state.V[1] == 0
        assert state.V[2] == 2


class TestCallReturn:
    """Test the call/return machine."""

    def test_call_then_return_resumes_after_call_site(self):
        """CALL A followed by RET at A lands right after the CALL."""
        state = program_state([0x2300])
        state = state.replace(memory=state.memory.at[0x300].set(0x00).at[0x301].set(0xEE))

        state = cycle(state)
        assert state.pc == 0x300
        assert state.stack.pointer == 1

        state = cycle(state)
        assert state.pc == 0x202
        assert state.stack.pointer == 0

    def test_nested_calls(self, fresh_state):
        """Returns unwind in LIFO order."""
        state = fresh_state.replace(pc=fresh_state.pc + 2)
        state = execute(state, 0x2400)  # pushes 0x202
        state = state.replace(pc=state.pc + 2)
        state = execute(state, 0x2500)  # pushes 0x402

        state = execute(state, 0x00EE)
        assert state.pc == 0x402
        state = execute(state, 0x00EE)
        assert state.pc == 0x202

    def test_stack_overflow_faults(self, fresh_state):
        """Seventeen nested calls overflow the 16-entry stack."""
        state = fresh_state
        for _ in range(STACK_SIZE):
            state = execute(state, 0x2300)
        assert state.stack.pointer == STACK_SIZE

        with pytest.raises(MachineFault, match="overflow"):
            execute(state, 0x2300)

    def test_stack_underflow_faults(self, fresh_state):
        """RET with an empty stack is a fault."""
        with pytest.raises(MachineFault, match="underflow"):
            execute(fresh_state, 0x00EE)
