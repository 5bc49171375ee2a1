import time

import jax

from chix8 import create_state, load_rom_bytes, run_cycles, run_until_frame, snapshot_display
from chix8.__main__ import render_text


def assemble(*words):
    rom = bytearray()
    for word in words:
        rom += bytes([(word >> 8) & 0xFF, word & 0xFF])
    return bytes(rom)


# Draws the digit glyphs 0-B side by side
COUNTER_ROM = assemble(
    0x00E0,  # 200: CLS
    0x6000,  # 202: V0 = 0 (x)
    0x6101,  # 204: V1 = 1 (y)
    0x6200,  # 206: V2 = 0 (digit)
    0xF229,  # 208: I = glyph(V2)
    0xD015,  # 20A: draw
    0x7005,  # 20C: x += 5
    0x7201,  # 20E: digit += 1
    0x320C,  # 210: skip if digit == 12
    0x1208,  # 212: loop
    0x1214,  # 214: halt
)

if __name__ == "__main__":
    state = load_rom_bytes(create_state(jax.random.PRNGKey(0)), COUNTER_ROM)

    state, cycles = run_until_frame(state, 100)
    print("Cycles until first frame:", cycles)

    # Measure compilation time
    start_compile = time.time()
    state = jax.block_until_ready(run_cycles(state, 1000))
    end_compile = time.time()

    print("Compilation + first run time (s):", end_compile - start_compile)

    # Measure execution time
    start_exec = time.time()
    state = jax.block_until_ready(run_cycles(state, 1000))
    end_exec = time.time()

    print("Execution time (s):", end_exec - start_exec)

    print(render_text(snapshot_display(state)))
