from hashlib import sha512
from secrets import token_bytes
from typing import Optional

from cryptography.hazmat.primitives.ciphers import Cipher
from cryptography.hazmat.primitives.ciphers.algorithms import ChaCha20


class CipherStream:
  """
  Deterministic pseudorandom byte stream (ChaCha20 keystream).

  The same seed always gives the same sequence of bytes. Without a seed
  the key is random.
  """
  def __init__(self, seed: Optional[bytes] = None):
    key = token_bytes(32) if seed is None else sha512(seed).digest()[:32]
    self._enc = Cipher(ChaCha20(key, bytes(16)), mode=None).encryptor()

  def read(self, n: int) -> bytes:
    """The next n bytes of the stream."""
    return self._enc.update(bytes(n))

  def xor_key_stream(self, buf: bytearray) -> None:
    """XOR the next len(buf) stream bytes into buf in place."""
    ks = self.read(len(buf))
    for i, k in enumerate(ks):
      buf[i] ^= k
