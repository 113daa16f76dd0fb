from dataclasses import replace
from secrets import randbelow, token_bytes

import nacl.bindings as sodium
import pytest

from edcurve import *
from edcurve.util import tobytes

ed = Curve(ED25519)
edfull = Curve(ED25519, full_group=True)
c1174 = Curve(CURVE1174)
ed448 = Curve(ED448)

ED25519_BASE = "5866666666666666666666666666666666666666666666666666666666666666"
ED448_BASE = (
  "14fa30f25b790898adc8d74e2c13bdfdc4397ce61cffd33ad7c2a0051e9c7887"
  "4098a36c7373ea4b62c7c9563720768824bcb66e71463f6900"
)


def test_setup():
  P = ED25519.P
  assert ed.identity == ed.point(ed.zero, ed.one)
  assert ed.identity.is_identity
  assert ed.base.y == ModInt(4, P) / ModInt(5, P)
  assert ed.prime_order() and not edfull.prime_order()
  assert ed.order == Exponent(ED25519.Q)
  assert edfull.order == Exponent(8 * ED25519.Q)
  assert ed.cofactor == ModInt(8, P)
  assert repr(ed) == "<Curve Ed25519 prime order>"
  # The group order is never usable as a field element
  with pytest.raises(TypeError):
    ModInt(ed.order, P)


def test_lengths():
  assert (ed.point_len(), ed.secret_len(), ed.pick_len()) == (32, 32, 29)
  assert edfull.secret_len() == 32
  assert (c1174.point_len(), c1174.pick_len()) == (32, 29)
  # 448 bits needs an extra byte for the sign
  assert (ed448.point_len(), ed448.secret_len(), ed448.pick_len()) == (57, 56, 54)


def test_base_point_encoding():
  assert bytes(ed.base).hex() == ED25519_BASE
  assert str(ed448.base) == ED448_BASE
  assert ed.decode_point(bytes.fromhex(ED25519_BASE)) == ed.base
  assert ed448.decode_point(bytes.fromhex(ED448_BASE)) == ed448.base


def test_base_point_search():
  # Full group base is searched from y = 2, which has no x on Ed25519
  assert edfull.base.y == ModInt(3, ED25519.P)
  assert edfull.coord_sign(edfull.base.x) == 0
  assert edfull.valid_point(edfull.base)
  # Searching a prime-order base point is deterministic and ends up in the subgroup
  param = replace(CURVE1174, PBX=0, PBY=0)
  c1, c2 = Curve(param), Curve(param)
  assert c1.base == c2.base
  assert c1.valid_point(c1.base)
  assert c1.base * (CURVE1174.Q - 1) == -c1.base


def test_broken_params():
  with pytest.raises(CurveConfigError) as exc:
    Curve(replace(ED25519, PBX=1))
  assert "invalid base point" in str(exc.value)
  # (0, -1) is on the curve but has order two
  with pytest.raises(CurveConfigError):
    Curve(replace(ED25519, PBX=0, PBY=-1))
  assert Curve(replace(ED25519, FBX=0, FBY=-1), full_group=True).base.is_identity is False


def test_vs_sodium():
  for i in range(5):
    k = 1 + randbelow(ED25519.Q - 1)
    K = ed.base * k
    assert bytes(K) == sodium.crypto_scalarmult_ed25519_base_noclamp(tobytes(k, 32))
    assert ed.valid_point(K)

  edpk, edsk = sodium.crypto_sign_keypair()
  P = ed.decode_point(edpk)
  assert bytes(P) == edpk
  assert ed.valid_point(P)


def test_point_types():
  aff = Curve(ED25519, point_type=AffinePoint)
  assert isinstance(aff.base, AffinePoint)
  assert isinstance(ed.base, ExtendedPoint)
  k = randbelow(ED25519.Q)
  assert bytes(aff.base * k) == bytes(ed.base * k)
  assert bytes(aff.base + aff.base) == bytes(2 * ed.base)
  assert aff.base - aff.base == aff.identity
  assert aff.base * ed.order == aff.identity


def test_solve_for_x():
  P = ED25519.P
  with pytest.raises(NotSquareError):
    ed.solve_for_x(ModInt(2, P))
  x = ed.solve_for_x(ed.base.y)
  assert x == ed.base.x or x == -ed.base.x
  for y in range(3, 40):
    y = ModInt(y, P)
    try:
      x = ed.solve_for_x(y)
    except NotSquareError:
      continue
    assert ed.on_curve(x, y)
    assert ed.on_curve(-x, y)
  assert not ed.on_curve(ed.one, ed.one)


def test_valid_point():
  P = ED25519.P
  order2 = ed.point(ed.zero, ModInt(-1, P))
  assert ed.on_curve(order2.x, order2.y)
  assert not ed.valid_point(order2)
  assert edfull.valid_point(edfull.point(edfull.zero, ModInt(-1, P)))
  assert not ed.valid_point(ed.point(ed.one, ed.one))
  # Idempotent and side effect free
  assert ed.valid_point(ed.base) and ed.valid_point(ed.base)


@pytest.mark.parametrize("curve", [ed, edfull, c1174, ed448, Curve(E521), Curve(CURVE41417, True)])
def test_encode_decode_roundtrip(curve):
  rand = CipherStream(b"roundtrip")
  for i in range(3):
    P, _ = curve.pick_point(rand=rand)
    b = bytes(P)
    assert len(b) == curve.point_len()
    Q = curve.decode_point(b)
    assert Q == P
    assert Q.x == P.x and Q.y == P.y
  assert curve.decode_point(bytes(curve.identity)).is_identity


def test_sign():
  P = ed.base * 12345
  b, nb = bytes(P), bytes(-P)
  assert b[:-1] == nb[:-1]
  assert b[-1] ^ nb[-1] == 0x80
  Q, NQ = ed.decode_point(b), ed.decode_point(nb)
  assert ed.coord_sign(Q.x) != ed.coord_sign(NQ.x)
  assert ed.on_curve(Q.x, Q.y) and ed.on_curve(NQ.x, NQ.y)
  assert NQ == -Q


def test_decode_errors():
  # The smallest y with no corresponding x on each curve
  for curve, y in (ed, 2), (c1174, 3), (ed448, 2):
    with pytest.raises(PointDecodeError) as exc:
      curve.decode_point(tobytes(y, curve.point_len()))
    assert "invalid elliptic curve point" == str(exc.value)
  assert c1174.on_curve(c1174.decode_point(tobytes(2, 32)).x, ModInt(2, CURVE1174.P))
  # Wrong length, y not reduced, and x = 0 with the sign set
  with pytest.raises(PointDecodeError):
    ed.decode_point(bytes(31))
  with pytest.raises(PointDecodeError):
    ed.decode_point(tobytes(ED25519.P, 32))
  with pytest.raises(PointDecodeError):
    ed.decode_point(tobytes(1 | 1 << 255, 32))


def test_decode_y_zero():
  # Only the sign bit set: y = 0 and x = sqrt(1/a) = sqrt(-1) on Ed25519
  P = ed.decode_point(bytes(31) + b"\x80")
  assert P.y == ed.zero
  assert ed.coord_sign(P.x) == 1
  assert P.x * P.x == -ed.one
  assert ed.on_curve(P.x, P.y)
  # Not in the prime-order subgroup, only checked on request
  assert not ed.valid_point(P)
  with pytest.raises(PointDecodeError):
    ed.decode_point(bytes(31) + b"\x80", check=True)
  assert edfull.decode_point(bytes(31) + b"\x80", check=True) == P


def test_decode_skips_subgroup_check():
  low = ed.point(ed.zero, -ed.one)
  Q = ed.base * 7 + low
  assert ed.decode_point(bytes(Q)) == Q
  with pytest.raises(PointDecodeError):
    ed.decode_point(bytes(Q), check=True)


@pytest.mark.parametrize("curve", [ed, c1174, ed448])
def test_pick_prime_order(curve):
  rand = CipherStream(b"pick")
  for i in range(3):
    P, rest = curve.pick_point(rand=rand)
    assert rest == b""
    assert curve.valid_point(P)
    assert not P.is_identity


def test_pick_vs_sodium():
  for i in range(3):
    P, _ = ed.pick_point()
    assert sodium.crypto_core_ed25519_is_valid_point(bytes(P))


@pytest.mark.parametrize("curve", [ed, edfull, c1174, ed448, Curve(CURVE1174, full_group=True)])
def test_embed(curve):
  rand = CipherStream(b"embed")
  for msg in b"", b"x", b"Hello world", token_bytes(curve.pick_len()):
    P, rest = curve.pick_point(msg, rand)
    assert rest == b""
    assert curve.on_curve(P.x, P.y)
    if curve.prime_order():
      assert curve.valid_point(P)
    assert curve.data(P) == msg
    assert curve.data(curve.decode_point(bytes(P))) == msg


def test_embed_remainder():
  msg = token_bytes(100)
  rest = msg
  parts = []
  while rest:
    P, rest = ed.pick_point(rest)
    parts.append(ed.data(P))
  assert len(parts) == 4
  assert parts[0] == msg[:29]
  assert b"".join(parts) == msg


def test_embedding_error():
  # The first byte of the base point encoding is 0x58, too long a length
  with pytest.raises(EmbeddingError) as exc:
    ed.data(ed.base)
  assert "invalid embedded data length" == str(exc.value)


def test_pick_deterministic():
  P1, _ = ed.pick_point(b"", CipherStream(b"seed"))
  P2, _ = ed.pick_point(b"", CipherStream(b"seed"))
  P3, _ = ed.pick_point(b"", CipherStream(b"other seed"))
  assert P1 == P2
  assert P1 != P3
  Q1, _ = ed448.pick_point(rand=CipherStream(b"seed"))
  Q2, _ = ed448.pick_point(rand=CipherStream(b"seed"))
  assert bytes(Q1) == bytes(Q2)


def test_pick_secret():
  s1 = pick_secret(ed, CipherStream(b"secret"))
  s2 = pick_secret(ed, CipherStream(b"secret"))
  assert s1 == s2
  assert 0 < s1 < ED25519.Q
  assert 0 < pick_secret(edfull, CipherStream()) < 8 * ED25519.Q


def test_reverse():
  for l in range(10):
    b = token_bytes(l)
    assert reverse(reverse(b)) == b
  assert reverse(b"\x01\x02\x03") == b"\x03\x02\x01"


def test_stream():
  a, b = CipherStream(b"seed"), CipherStream(b"seed")
  assert a.read(10) + a.read(22) == b.read(32)
  buf = bytearray(16)
  CipherStream(b"seed").xor_key_stream(buf)
  assert bytes(buf) == CipherStream(b"seed").read(16)
  assert CipherStream().read(32) != CipherStream().read(32)
