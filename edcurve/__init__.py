# A plain Python package for twisted Edwards curve arithmetic:
# point validation, compressed encoding, random points with embedded
# data, and Elligator uniform encodings.

# Not constant time and not zeroing buffers after use. Intended for
# protocols that need curve-generic code (arbitrary parameter tables,
# full group or prime-order subgroup) rather than raw speed.

# Public symbols are imported here.

from .curve import Curve
from .elligator import Elligator1, Elligator2, Hiding
from .exceptions import CurveConfigError, ElligatorError, EmbeddingError, NotSquareError, PointDecodeError
from .field import ModInt
from .params import CURVE1174, CURVE41417, E521, ED448, ED25519, PARAMS, Param, param_by_name
from .point import AffinePoint, EdPoint, ExtendedPoint
from .scalar import Exponent, pick_secret
from .stream import CipherStream
from .util import reverse

__version__ = "0.1.0"
