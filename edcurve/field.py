from __future__ import annotations

from functools import cached_property

from .exceptions import NotSquareError


class ModInt:
  """An integer modulo an odd prime m, always normalized into [0, m)"""
  def __init__(self, v: int, m: int):
    if not isinstance(v, int) or isinstance(v, bool):
      raise TypeError(f"ModInt needs an int value, not {type(v).__name__}")
    self.m = m
    self.val = v % m

  @staticmethod
  def from_bytes(b: bytes, m: int) -> ModInt:
    """Big-endian decode"""
    return ModInt(int.from_bytes(b, "big"), m)

  def __hash__(self): return hash((self.val, self.m))
  def __repr__(self): return f"ModInt({self.val}, {self.m})"
  def __str__(self): return str(self.val)
  def __int__(self): return self.val
  def __bytes__(self): return self.val.to_bytes(self.byte_len, "big")
  def bit(self, n: int) -> int: return self.val >> n & 1

  @property
  def byte_len(self) -> int: return (self.m.bit_length() + 7) // 8

  def _check(self, o) -> ModInt:
    if not isinstance(o, ModInt): raise TypeError(f"Cannot combine ModInt with {o!r}")
    if o.m != self.m: raise TypeError("ModInt moduli do not match")
    return o

  def __eq__(self, other):
    # Note: if we return NotImplemented, Python does object comparison and returns False
    return self.val == self._check(other).val

  def __abs__(self): return -self if self.is_negative else self
  def __neg__(self): return ModInt(-self.val, self.m)
  def __add__(self, o: ModInt): return ModInt(self.val + self._check(o).val, self.m)
  def __sub__(self, o: ModInt): return ModInt(self.val - self._check(o).val, self.m)
  def __mul__(self, o: ModInt): return ModInt(self.val * self._check(o).val, self.m)

  def __truediv__(self, o: ModInt) -> ModInt:
    """Division mod m"""
    return self * self._check(o).inv

  def __pow__(self, s: int) -> ModInt:
    return ModInt(pow(self.val, s, self.m), self.m)

  @cached_property
  def inv(self) -> ModInt:
    if not self.val: raise ZeroDivisionError("ModInt division by zero")
    return ModInt(pow(self.val, -1, self.m), self.m)

  @cached_property
  def is_negative(self) -> bool: return self.val > (self.m - 1) // 2

  @cached_property
  def chi(self) -> ModInt:
    """Legendre symbol: 0, 1 or -1"""
    return self**((self.m - 1) // 2)

  @cached_property
  def is_square(self) -> bool: return self.val == 0 or self.chi.val == 1

  @cached_property
  def sqrt(self) -> ModInt:
    """The non-negative square root. Raises NotSquareError if there is none."""
    if not self.is_square: raise NotSquareError("Not a square!")
    root = ModInt(_sqrt(self.val, self.m), self.m)
    assert root * root == self
    return abs(root)


def _sqrt(n: int, p: int) -> int:
  """Square root of a known quadratic residue n mod p"""
  if n == 0:
    return 0
  if p % 4 == 3:
    return pow(n, (p + 1) // 4, p)
  if p % 8 == 5:
    # 2 is a non-square here, so 2^((p-1)/4) is a square root of -1
    root = pow(n, (p + 3) // 8, p)
    if root * root % p != n: root = root * pow(2, (p - 1) // 4, p) % p
    return root
  # Tonelli-Shanks
  q, s = p - 1, 0
  while q % 2 == 0:
    q, s = q // 2, s + 1
  z = 2
  while pow(z, (p - 1) // 2, p) != p - 1:
    z += 1
  m, c, t, r = s, pow(z, q, p), pow(n, q, p), pow(n, (q + 1) // 2, p)
  while t != 1:
    i, t2 = 0, t
    while t2 != 1:
      t2, i = t2 * t2 % p, i + 1
    b = pow(c, 1 << m - i - 1, p)
    m, c = i, b * b % p
    t, r = t * c % p, r * b % p
  return r
