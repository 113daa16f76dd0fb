from __future__ import annotations

from dataclasses import dataclass

# Twisted Edwards curve parameter tables: a x2 + y2 = 1 + d x2 y2 (mod P)
# Values from RFC 8032, RFC 7748 and https://safecurves.cr.yp.to


@dataclass(frozen=True)
class Param:
  name: str
  P: int  # Field prime
  A: int  # Curve coefficients, as integers (reduced mod P by the engine)
  D: int
  Q: int  # Order of the prime-order subgroup
  R: int  # Cofactor
  PBX: int = 0  # Prime-order base point (zero y means search for one)
  PBY: int = 0
  FBX: int = 0  # Full group base point
  FBY: int = 0
  elligator1s: int = 0  # Elligator 1 parameter s, or zero
  elligator2n: int = 0  # Elligator 2 non-square, or zero

  def __str__(self): return self.name


ED25519 = Param(
  name="Ed25519",
  P=2**255 - 19,
  A=-1,
  D=37095705934669439343138083508754565189542113879843219016388785533085940283555,  # -121665/121666
  Q=2**252 + 27742317777372353535851937790883648493,
  R=8,
  PBX=15112221349535400772501151409588531511454012693041857206046113283949847762202,
  PBY=46316835694926478169428394003475163141307993866256225615783033603165251855960,  # 4/5
  elligator2n=2,
)

CURVE1174 = Param(
  name="Curve1174",
  P=2**251 - 9,
  A=1,
  D=-1174,
  Q=2**249 - 11332719920821432534773113288178349711,
  R=4,
  PBX=1582619097725911541954547006453739763381091388846394833492296309729998839514,
  PBY=3037538013604154504764115728651437646519513534305223422754827055689195992590,
  elligator1s=1806494121122717992522804053500797229648438766985538871240722010849934886421,
)

CURVE41417 = Param(
  name="Curve41417",
  P=2**414 - 17,
  A=1,
  D=3617,
  Q=2**411 - 33364140863755142520810177694098385178984727200411208589594759,
  R=8,
  PBX=17319886477121189177719202498822615443556957307604340815256226171904769976866975908866528699294134494857887698432266169206165,
  PBY=34,
)

# 448 bits leaves no spare bit in the y-coordinate encoding
ED448 = Param(
  name="Ed448",
  P=2**448 - 2**224 - 1,
  A=1,
  D=-39081,
  Q=2**446 - 13818066809895115352007386748515426880336692474882178609894547503885,
  R=4,
  PBX=224580040295924300187604334099896036246789641632564134246125461686950415467406032909029192869357953282578032075146446173674602635247710,
  PBY=298819210078481492676017930443930673437544040154080242095928241372331506189835876003536878655418784733982303233503462500531545062832660,
)

E521 = Param(
  name="E-521",
  P=2**521 - 1,
  A=1,
  D=-376014,
  Q=2**519 - 337554763258501705789107630418782636071904961214051226618635150085779108655765,
  R=4,
  PBX=1571054894184995387535939749894317568645297350402905821437625181152304994381188529632591196067604100772673927915114267193389905003276673749012051148356041324,
  PBY=12,
)

PARAMS = [ED25519, CURVE1174, CURVE41417, ED448, E521]


def param_by_name(name: str) -> Param:
  """Find a parameter table by its name (case and punctuation insensitive)."""
  key = name.lower().replace("-", "").replace("_", "")
  for p in PARAMS:
    if p.name.lower().replace("-", "") == key:
      return p
  raise KeyError(f"Unknown curve {name!r}, try one of: {', '.join(p.name for p in PARAMS)}")
