"""Exceptions surfaced to the host."""


class Chip8Error(Exception):
    """Base class for interpreter errors."""


class RomTooLargeError(Chip8Error):
    """ROM does not fit between PROGRAM_START and the end of memory."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"ROM is {size} bytes, at most {limit} bytes fit in memory")


class MachineFault(Chip8Error):
    """A running program did something the machine cannot represent.

    Raised for call stack overflow and underflow, and for memory accesses
    (fetch or I-relative) past the end of the address space.
    """
