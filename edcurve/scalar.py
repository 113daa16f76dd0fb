from __future__ import annotations

from typing import TYPE_CHECKING

from .util import bitmask, toint

if TYPE_CHECKING:
  from .curve import Curve
  from .stream import CipherStream


class Exponent:
  """
  Unreduced integer used only as a point multiplier.

  Holds group orders, which must never be reduced: the order modulo itself
  is zero, and every point would pass the subgroup test. Not an int, so it
  cannot be turned into a ModInt.
  """
  __slots__ = ("val",)

  def __init__(self, val: int):
    if not isinstance(val, int) or val < 0:
      raise ValueError(f"Invalid exponent {val!r}")
    self.val = val

  def __int__(self): return self.val
  def __repr__(self): return f"Exponent({self.val})"
  def __hash__(self): return hash(("Exponent", self.val))
  def bit_length(self) -> int: return self.val.bit_length()

  def __eq__(self, other):
    if not isinstance(other, Exponent): return NotImplemented
    return self.val == other.val


def pick_secret(curve: Curve, rand: CipherStream) -> int:
  """Uniformly random scalar in [1, order) read from the stream."""
  order = curve.order.val
  mask = bitmask(order.bit_length())
  while True:
    s = toint(rand.read(curve.secret_len())) & mask
    if 0 < s < order:
      return s
