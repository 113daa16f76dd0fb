from __future__ import annotations

import logging
from contextlib import suppress
from typing import Optional, Tuple, Type

from .elligator import Elligator1, Elligator2, Hiding
from .exceptions import CurveConfigError, ElligatorError, EmbeddingError, NotSquareError, PointDecodeError
from .field import ModInt
from .params import Param
from .point import EdPoint, ExtendedPoint
from .scalar import Exponent
from .stream import CipherStream
from .util import bitmask, reverse

logger = logging.getLogger(__name__)


class Curve:
  """
  Twisted Edwards curve a x2 + y2 = 1 + d x2 y2, independent of the point representation.

  The point type (group law) is injected at construction. Setup validates
  the identity and base points and raises CurveConfigError if either fails,
  after which the curve is immutable and safe to share between threads.
  """
  def __init__(self, param: Param, full_group: bool = False, point_type: Type[EdPoint] = ExtendedPoint):
    self.param = param
    self.P = param.P
    self.full = full_group
    self.point_type = point_type

    # Curve constants as ModInts for convenience
    self.zero = ModInt(0, self.P)
    self.one = ModInt(1, self.P)
    self.a = ModInt(param.A, self.P)
    self.d = ModInt(param.D, self.P)
    self.cofactor = ModInt(param.R, self.P)

    # Only ever a multiplier for the subgroup check, never a field element
    self.order = Exponent(param.R * param.Q if full_group else param.Q)

    # Identity element is (0,1)
    self.identity = self.point(self.zero, self.one)
    self.base = self._base_point()

    # Uniform encodings only make sense in the full group
    # (points taken from the subgroup would be trivially recognizable)
    self.hide: Optional[Hiding] = None
    if full_group:
      if param.elligator1s:
        self.hide = Elligator1(self, param.elligator1s)
      elif param.elligator2n:
        self.hide = Elligator2(self, param.elligator2n)
    if self.hide:
      logger.debug("%s: uniform encoding %s", self, type(self.hide).__name__)

    # Sanity checks
    if not self.valid_point(self.identity):
      logger.error("%s: invalid identity point %r", self, self.identity)
      raise CurveConfigError(f"invalid identity point {self.identity!r}")
    if not self.valid_point(self.base):
      logger.error("%s: invalid base point %r", self, self.base)
      raise CurveConfigError(f"invalid base point {self.base!r}")

  def __repr__(self):
    return f"<Curve {self.param.name} {'full group' if self.full else 'prime order'}>"

  def _base_point(self) -> EdPoint:
    p = self.param
    bx, by = (p.FBX, p.FBY) if self.full else (p.PBX, p.PBY)
    if by % self.P:
      return self.point(ModInt(bx, self.P), ModInt(by, self.P))
    # No standard base point was defined, so pick the lowest-numbered y that works
    y = ModInt(2, self.P)
    while True:
      with suppress(NotSquareError):
        x = self.solve_for_x(y)
        if self.coord_sign(x):
          x = -x  # try positive x first
        for B in self.point(x, y), self.point(-x, y):
          if self.valid_point(B):
            logger.debug("%s: picked base point %r", self, B)
            return B
      y += self.one

  def point(self, x: ModInt, y: ModInt) -> EdPoint:
    """Construct a point of this curve from raw coordinates (not validated)."""
    return self.point_type(self, x, y)

  def prime_order(self) -> bool:
    return not self.full

  def secret_len(self) -> int:
    """Size in bytes of an encoded secret for this curve."""
    return (self.order.bit_length() + 7) // 8

  def point_len(self) -> int:
    """Size in bytes of a compressed point: the y-coordinate and the sign of x."""
    return (self.P.bit_length() + 7 + 1) // 8

  def coord_sign(self, i: ModInt) -> int:
    """The least-significant bit of a coordinate is used as its sign."""
    return i.bit(0)

  def encode_point(self, P: EdPoint) -> bytes:
    """Compressed little-endian encoding, as in Ed25519."""
    b = bytearray(bytes(P.y))
    if self.P.bit_length() & 7 == 0:
      # No unused bits at the top of the y-coordinate, so prepend a whole byte
      b[:0] = bytes(1)
    if self.coord_sign(P.x):
      b[0] |= 0x80
    return reverse(b)

  def decode_point(self, bb: bytes, check: bool = False) -> EdPoint:
    """
    Decode a compressed point.

    Note that this does NOT check that the point is in the prime-order subgroup
    unless check is set: an encoding may denote a point in a larger subgroup.
    The SafeCurves criteria (https://safecurves.cr.yp.to) ensure that the only
    small subgroups are those of the cofactor, so Diffie-Hellman can be done
    without the check, exposing at most the low bits of the secret.

    :raises PointDecodeError: if the bytes do not denote a curve point
    """
    if len(bb) != self.point_len():
      raise PointDecodeError(f"invalid elliptic curve point length {len(bb)}")
    b = bytearray(reverse(bb))
    xsign = b[0] >> 7
    b[0] &= 0x7F
    y = ModInt.from_bytes(b, self.P)
    if y.val != int.from_bytes(b, "big"):
      raise PointDecodeError("invalid elliptic curve point (non-canonical y)")
    try:
      x = self.solve_for_x(y)
    except NotSquareError:
      raise PointDecodeError("invalid elliptic curve point") from None
    if xsign and x == self.zero:
      raise PointDecodeError("invalid elliptic curve point (negative zero)")
    if self.coord_sign(x) != xsign:
      x = -x
    P = self.point(x, y)
    if check and not self.valid_point(P):
      raise PointDecodeError("elliptic curve point not in the subgroup")
    return P

  def solve_for_x(self, y: ModInt) -> ModInt:
    """
    Solve the curve equation for x, rewritten as x2 = (1 - y2) / (a - d y2)

    :raises NotSquareError: if no x-coordinate corresponds to y
    """
    yy = y * y
    t1 = self.one - yy
    t2 = self.a - self.d * yy
    if t2 == self.zero:
      raise NotSquareError("No x-coordinate for this y")
    return (t1 / t2).sqrt

  def on_curve(self, x: ModInt, y: ModInt) -> bool:
    """Test the curve equation a x2 + y2 = 1 + d x2 y2"""
    xx, yy = x * x, y * y
    return self.a * xx + yy == self.one + self.d * xx * yy

  def valid_point(self, P: EdPoint) -> bool:
    """Test that a point is on the curve and within the appropriate subgroup."""
    if not self.on_curve(P.x, P.y):
      return False
    return P * self.order == self.identity

  def pick_len(self) -> int:
    """Number of bytes that can be embedded into points on this curve."""
    # Reserve 8 most-significant bits for randomness,
    # and the least-significant 8 bits for the embedded data length.
    return (self.P.bit_length() - 8 - 8) // 8

  def pick_point(self, data: Optional[bytes] = None, rand: Optional[CipherStream] = None) -> Tuple[EdPoint, bytes]:
    """
    Pick a pseudorandom curve point, optionally embedding data in it.

    :returns: (point, the part of data that did not fit)
    """
    rand = rand or CipherStream()
    dl = 0 if data is None else min(self.pick_len(), len(data))
    l = self.point_len()
    bits = self.P.bit_length()
    tries = 0
    while True:
      tries += 1
      # Random bits the size of a compressed point, interpreted as little-endian
      b = bytearray(rand.read(l))
      if data is not None:
        b[0] = dl  # Length in the low 8 bits
        b[1:1 + dl] = data[:dl]
      b = bytearray(reverse(b))
      xsign = b[0] >> 7
      b[0] &= bitmask(bits & 7)  # clear bits above the modulus width
      y = ModInt.from_bytes(b, self.P)
      if y.val != int.from_bytes(b, "big"):
        continue  # not a canonical y, the data would not survive encoding
      try:
        x = self.solve_for_x(y)
      except NotSquareError:
        continue  # no such point, retry
      if self.coord_sign(x) != xsign:
        x = -x
      P = self.point(x, y)
      if self.full:
        # Any point on the curve will do
        break
      if data is None:
        # Project into the prime-order subgroup by multiplying by the cofactor
        P = P * int(self.cofactor)
        if P.is_identity:
          continue
        break
      # The y-coordinate carries the data, so only a point already in the subgroup will do
      if P * self.order == self.identity:
        break
    logger.debug("%s: picked a point after %d tries", self, tries)
    return P, b"" if data is None else bytes(data[dl:])

  def data(self, P: EdPoint) -> bytes:
    """
    Extract the data embedded in a point.

    :raises EmbeddingError: if the point carries no valid data length
    """
    b = self.encode_point(P)
    dl = b[0]
    if dl > self.pick_len():
      raise EmbeddingError("invalid embedded data length")
    return b[1:1 + dl]

  def hide_len(self) -> int:
    if not self.hide: raise ElligatorError(f"{self} has no uniform encoding")
    return self.hide.hide_len()

  def hide_encode(self, P: EdPoint, rand: Optional[CipherStream] = None) -> bytes:
    """Uniform representative of P, indistinguishable from random bytes."""
    if not self.hide: raise ElligatorError(f"{self} has no uniform encoding")
    return self.hide.hide_encode(P, rand or CipherStream())

  def hide_decode(self, rep: bytes) -> EdPoint:
    if not self.hide: raise ElligatorError(f"{self} has no uniform encoding")
    return self.hide.hide_decode(rep)

  def hide_point(self, rand: Optional[CipherStream] = None) -> Tuple[EdPoint, bytes]:
    """Pick a random point that has a uniform representative, returning both."""
    if not self.hide: raise ElligatorError(f"{self} has no uniform encoding")
    rand = rand or CipherStream()
    while True:
      # Try until successful, about half of our attempts should fail
      with suppress(ElligatorError):
        P, _ = self.pick_point(rand=rand)
        return P, self.hide_encode(P, rand)
