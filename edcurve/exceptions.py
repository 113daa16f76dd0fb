class CurveConfigError(RuntimeError):
  """Curve parameter table is broken (identity or base point fails validation)"""

class PointDecodeError(ValueError):
  """Bytes do not denote a valid curve point"""

class EmbeddingError(ValueError):
  """Point does not carry a valid embedded data length"""

class NotSquareError(ValueError):
  """Field element has no square root"""

class ElligatorError(ValueError):
  """Point is incompatible with Elligator hashing"""
