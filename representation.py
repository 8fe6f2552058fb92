"""
Representation layer for snugint.

A representation is the integral storage type underneath a bounded value.
Python integers never overflow, so the range a fixed-width type would
impose is made explicit here: every representation carries its inclusive
natural range [lo, hi], and the engine refuses any result outside it.

This module also provides the common presets (C-style fixed-width signed
and unsigned types) and a small one for exhaustive verification.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from pydantic import Field


@dataclass(frozen=True)
class Representation:
    """
    A named integer domain [lo, hi].

    The range must contain 0 so that default construction is always
    representable.  ``lo == hi`` is allowed here but such a degenerate
    representation cannot back a bounded value.
    """

    name: str
    lo: int
    hi: int

    def __post_init__(self):
        for bound in (self.lo, self.hi):
            if not isinstance(bound, int):
                raise ValueError(
                    f"{self.name} bounds must be integers, got {bound!r}"
                )
        if self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must be <= hi ({self.hi})")
        if not self.lo <= 0 <= self.hi:
            raise ValueError(
                f"{self.name} range [{self.lo}, {self.hi}] must include 0"
            )

    @classmethod
    def from_bits(cls, bits: int, signed: bool = True) -> Representation:
        """Two's-complement (signed) or unsigned fixed-width representation."""
        if bits < 1:
            raise ValueError(f"bits must be positive, got {bits}")
        if signed:
            return cls(f"int{bits}", -(2 ** (bits - 1)), 2 ** (bits - 1) - 1)
        return cls(f"uint{bits}", 0, 2**bits - 1)

    @property
    def width(self) -> int:
        """Total number of representable values."""
        return self.hi - self.lo + 1

    @property
    def bounds(self) -> tuple[int, int]:
        return self.lo, self.hi

    @property
    def degenerate(self) -> bool:
        return self.lo == self.hi

    @property
    def signed(self) -> bool:
        return self.lo < 0

    def contains(self, value: int) -> bool:
        return self.lo <= value <= self.hi

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)

    def field_type(self):
        """Annotated int type that pydantic validates against this range."""
        return Annotated[int, Field(strict=True, ge=self.lo, le=self.hi)]

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Common representation presets
# ---------------------------------------------------------------------------

INT8 = Representation.from_bits(8)
INT16 = Representation.from_bits(16)
INT32 = Representation.from_bits(32)
INT64 = Representation.from_bits(64)
UINT8 = Representation.from_bits(8, signed=False)
UINT16 = Representation.from_bits(16, signed=False)
UINT32 = Representation.from_bits(32, signed=False)
UINT64 = Representation.from_bits(64, signed=False)
BOOL = Representation("bool", 0, 1)

# Small range useful for exhaustive verification
TINY = Representation.from_bits(4)
