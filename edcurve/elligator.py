from __future__ import annotations

# Elligator 1 and 2, see sections 3 and 5 of
# https://www.shiftleft.org/papers/elligator/elligator.pdf

# A curve point in compressed form is easy to tell apart from random data:
# only about half of all y values are on the curve at all. Elligator maps
# roughly half of the curve points one-to-one onto field elements in
# [0, (P-1)/2], which in turn look uniformly random once the spare high bits
# are filled with random bits. Points that cannot be mapped are rejected
# with ElligatorError, so callers pick points until one works.
#
# Only full group points should be hidden, because multiplying a prime
# group point by the subgroup order gives the identity, which an adversary
# could test after unhashing.

from typing import TYPE_CHECKING

from .exceptions import CurveConfigError, ElligatorError
from .field import ModInt
from .point import EdPoint
from .stream import CipherStream
from .util import bitmask, tobytes, toint

if TYPE_CHECKING:
  from .curve import Curve


class Hiding:
  """Uniform encoding of curve points as fixed-length random-looking bytes."""
  def __init__(self, curve: Curve):
    self.curve = curve
    # Representatives are at most (P-1)/2, so one bit narrower than P
    self.bits = curve.P.bit_length() - 1

  def hide_len(self) -> int:
    return (self.curve.P.bit_length() + 7) // 8

  def hide_encode(self, P: EdPoint, rand: CipherStream) -> bytes:
    """
    Little-endian representative of P, with the spare high bits taken from rand.

    :raises ElligatorError: if P has no representative
    """
    l = self.hide_len()
    r = self.representative(P).val
    tweak = toint(rand.read(l)) & ~bitmask(self.bits)
    assert r & tweak == 0, "The representative and the tweak should not overlap"
    return tobytes(r | tweak, l)

  def hide_decode(self, rep: bytes) -> EdPoint:
    """Restore the point from its representative."""
    if len(rep) != self.hide_len():
      raise ElligatorError(f"Invalid representative length {len(rep)}")
    return self.point(ModInt(toint(rep) & bitmask(self.bits), self.curve.P))

  def representative(self, P: EdPoint) -> ModInt: raise NotImplementedError
  def point(self, r: ModInt) -> EdPoint: raise NotImplementedError


class Elligator1(Hiding):
  """Elligator 1 for curves x2 + y2 = 1 + d x2 y2 with P = 3 mod 4."""
  def __init__(self, curve: Curve, s: int):
    super().__init__(curve)
    one = curve.one
    self.s = ModInt(s, curve.P)
    self.c = ModInt(2, curve.P) / (self.s * self.s)  # c = 2/s^2
    self.r = self.c + self.c.inv  # r = c + 1/c
    self.r2m2 = self.r * self.r - ModInt(2, curve.P)
    self.invc2 = self.c.inv * self.c.inv
    self.cm1s = (self.c - one) * self.s
    self.pp1d4 = (curve.P + 1) // 4
    if curve.a != one or curve.P % 4 != 3:
      raise CurveConfigError(f"{curve.param} is not suitable for Elligator 1")
    d = -(self.c + one) * (self.c + one) / ((self.c - one) * (self.c - one))
    if d != curve.d:
      raise CurveConfigError(f"Elligator 1 parameter s does not match d of {curve.param}")

  def point(self, t: ModInt) -> EdPoint:
    c = self.curve
    one = c.one
    if t == one or t == -one:
      return c.identity
    u = (one - t) / (one + t)
    u2 = u * u
    v = (u2 * u2 + self.r2m2 * u2 + one) * u  # v = u^5 + (r^2-2)u^3 + u
    chiv = v.chi
    X = chiv * u
    Y = (chiv * v)**self.pp1d4 * chiv * (u2 + self.invc2).chi
    x = self.cm1s * X * (one + X) / Y
    rX, X1 = self.r * X, (one + X) * (one + X)
    y = (rX - X1) / (rX + X1)
    return c.point(x, y)

  def representative(self, P: EdPoint) -> ModInt:
    c = self.curve
    one = c.one
    x, y = P.x, P.y
    if y + one == c.zero:
      raise ElligatorError("The point cannot be Elligator hashed")
    etar = self.r * (y - one) / ((y + one) + (y + one))  # eta r = r(y-1)/2(y+1)
    etarp1 = one + etar
    b = etarp1 * etarp1 - one
    if not b.is_square:
      raise ElligatorError("The point cannot be Elligator hashed")
    if etar == -ModInt(2, c.P):
      if x != ModInt(2, c.P) * self.s * (self.c - one) * self.c.chi / self.r:
        raise ElligatorError("The point cannot be Elligator hashed")
    X = b**self.pp1d4 - etarp1
    z = (self.cm1s * X * (one + X) * x * (X * X + self.invc2)).chi
    u = z * X
    if u == -one:
      raise ElligatorError("The point cannot be Elligator hashed")
    return abs((one - u) / (one + u))


class Elligator2(Hiding):
  """
  Elligator 2 via the Montgomery form B v2 = u3 + A u2 + u of the curve.

  u = (1 + y) / (1 - y) and the sign of x stands in for the sign of v,
  which is never computed.
  """
  def __init__(self, curve: Curve, n: int):
    super().__init__(curve)
    self.n = ModInt(n, curve.P)  # non-square
    if curve.P % 4 != 1 or self.n.is_square or curve.a == curve.d or not (curve.a - curve.d).is_square:
      raise CurveConfigError(f"{curve.param} is not suitable for Elligator 2")
    self.A = ModInt(2, curve.P) * (curve.a + curve.d) / (curve.a - curve.d)
    self.half = ModInt(2, curve.P).inv

  def point(self, r: ModInt) -> EdPoint:
    c = self.curve
    one, A = c.one, self.A
    w = -A / (one + self.n * r * r)
    e = (w * w * w + A * w * w + w).chi
    if e == c.zero:
      e = one
    u = e * w - (one - e) * A * self.half
    v = -e * (u * u * u + A * u * u + u).sqrt
    if u + one == c.zero:
      return c.identity
    y = (u - one) / (u + one)
    x = c.solve_for_x(y)
    if c.coord_sign(x) != v.is_negative:
      x = -x
    return c.point(x, y)

  def representative(self, P: EdPoint) -> ModInt:
    c = self.curve
    one, A = c.one, self.A
    if P.y == one:
      raise ElligatorError("The identity point cannot be Elligator hashed")
    u = (one + P.y) / (one - P.y)
    if u == c.zero or u == -A or not (-self.n * u * (u + A)).is_square:
      raise ElligatorError("The point cannot be Elligator hashed")
    if c.coord_sign(P.x):
      return (-(u + A) / (self.n * u)).sqrt
    return (-u / (self.n * (u + A))).sqrt
