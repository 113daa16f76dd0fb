def reverse(b) -> bytes:
  """Byte-reverse, converting between little-endian and big-endian forms."""
  return bytes(b[::-1])


def bitmask(bits: int) -> int:
  return (1 << bits) - 1


def tobytes(x: int, l: int) -> bytes:
  return x.to_bytes(l, "little")


def toint(b) -> int:
  return int.from_bytes(b, "little")
