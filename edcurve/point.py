from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING, Optional, Union

from .field import ModInt
from .scalar import Exponent

if TYPE_CHECKING:
  from .curve import Curve


class EdPoint:
  """
  Twisted Edwards curve point, the common part of all representations.

  Points are immutable values bound to a Curve. Subclasses provide the
  group law (__add__ and __neg__) and the affine x, y coordinates.
  """
  curve: Curve
  x: ModInt
  y: ModInt

  def __repr__(self): return f"{type(self).__name__}({self.x}, {self.y})"
  def __str__(self): return bytes(self).hex()
  def __bytes__(self): return self.curve.encode_point(self)
  def __hash__(self): return hash((self.x.val, self.y.val))

  def __add__(self, othr: EdPoint) -> EdPoint: raise NotImplementedError
  def __neg__(self) -> EdPoint: raise NotImplementedError

  @property
  def is_identity(self) -> bool: return self == self.identity()

  def identity(self) -> EdPoint:
    return type(self)(self.curve, self.curve.zero, self.curve.one)

  def __sub__(self, othr: EdPoint) -> EdPoint:
    return self + -othr

  def __mul__(self, s: Union[int, Exponent]) -> EdPoint:
    """Multiply the point by a scalar or an exponent."""
    # Never reduce s here: the subgroup check multiplies by the group order itself
    if isinstance(s, Exponent): s = s.val
    if not isinstance(s, int): return NotImplemented
    P = self
    if s < 0: s, P = -s, -P
    Q = self.identity()
    while s > 0:
      if s & 1: Q += P
      P += P
      s >>= 1
    return Q.norm

  def __rmul__(self, s: Union[int, Exponent]) -> EdPoint:
    return self * s

  @property
  def norm(self) -> EdPoint: return self

  def __eq__(self, othr):
    if not isinstance(othr, EdPoint): raise TypeError(f"EdPoints cannot be compared with {type(othr)}")
    return self.x == othr.x and self.y == othr.y


class AffinePoint(EdPoint):
  """Point in plain affine (x, y) coordinates."""
  def __init__(self, curve: Curve, x: ModInt, y: ModInt):
    self.curve = curve
    self.x = x
    self.y = y

  def __neg__(self) -> AffinePoint:
    return AffinePoint(self.curve, -self.x, self.y)

  def __add__(self, othr: EdPoint) -> AffinePoint:
    if not isinstance(othr, EdPoint): return NotImplemented
    c = self.curve
    x1, y1, x2, y2 = self.x, self.y, othr.x, othr.y
    dxy = c.d * x1 * x2 * y1 * y2
    x3 = (x1 * y2 + y1 * x2) / (c.one + dxy)
    y3 = (y1 * y2 - c.a * x1 * x2) / (c.one - dxy)
    return AffinePoint(c, x3, y3)


# Extended coordinates (X, Y, Z, T) with x = X/Z, y = Y/Z, x*y = T/Z

class ExtendedPoint(EdPoint):
  """Point in extended coordinates, avoiding divisions in the group law."""
  def __init__(self, curve: Curve, x: ModInt, y: ModInt, z: Optional[ModInt] = None, t: Optional[ModInt] = None):
    self.curve = curve
    self.X = x
    self.Y = y
    self.Z = curve.one if z is None else z
    self.T = x * y if t is None else t

  @cached_property
  def x(self) -> ModInt: return self.X / self.Z

  @cached_property
  def y(self) -> ModInt: return self.Y / self.Z

  @cached_property
  def norm(self) -> ExtendedPoint:
    """Return a normalized point, with Z=1."""
    return ExtendedPoint(self.curve, self.x, self.y)

  def __neg__(self) -> ExtendedPoint:
    return ExtendedPoint(self.curve, -self.X, self.Y, self.Z, -self.T)

  def __add__(self, othr: EdPoint) -> ExtendedPoint:
    if not isinstance(othr, ExtendedPoint):
      if not isinstance(othr, EdPoint): return NotImplemented
      othr = ExtendedPoint(self.curve, othr.x, othr.y)
    # Unified addition, complete when a is square and d is not
    c = self.curve
    A = self.X * othr.X
    B = self.Y * othr.Y
    C = self.T * c.d * othr.T
    D = self.Z * othr.Z
    E = (self.X + self.Y) * (othr.X + othr.Y) - A - B
    F, G, H = D - C, D + C, B - c.a * A
    return ExtendedPoint(c, E * F, G * H, F * G, E * H)

  def __eq__(self, othr):
    if not isinstance(othr, ExtendedPoint): return super().__eq__(othr)
    # x1 / z1 == x2 / z2  <==>  x1 * z2 == x2 * z1
    return (
      self.X * othr.Z == othr.X * self.Z and
      self.Y * othr.Z == othr.Y * self.Z
    )

  def __hash__(self): return super().__hash__()
