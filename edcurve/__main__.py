import logging
import sys
from time import perf_counter
from typing import NoReturn

import colorama
from tqdm import tqdm

import edcurve
from edcurve.curve import Curve
from edcurve.params import PARAMS, param_by_name
from edcurve.stream import CipherStream

hdrhelp = """\
Usage:
  edcurve info CURVE [--full]
  edcurve pick CURVE [--full] [--data TEXT] [--seed SEED]
  edcurve decode CURVE HEXPOINT [--check]
  edcurve extract CURVE HEXPOINT
  edcurve bench CURVE [--full] [-n ROUNDS]
"""

opthelp = f"""\
  --full            Use the full group rather than the prime-order subgroup
  --data TEXT       Text to embed in the picked point
  --seed SEED       Deterministic random stream seed
  --check           Also require the point to be in the subgroup
  -n ROUNDS         Benchmark rounds (default 100)
  --debug           Show debug logging and do not catch errors

Curves: {', '.join(p.name for p in PARAMS)}
"""

cmdhelp = f"""\
edcurve {edcurve.__version__} - Twisted Edwards curve points, encodings and Elligator

{hdrhelp}
{opthelp}"""


class Args:

  def __init__(self):
    self.mode = None
    self.files = []
    self.full = None
    self.data = []
    self.seed = []
    self.check = None
    self.rounds = []
    self.debug = None


modeargs = dict(
  full='--full'.split(),
  data='--data'.split(),
  seed='--seed'.split(),
  check='--check'.split(),
  rounds='-n --rounds'.split(),
  debug='--debug'.split(),
)

# Number of positional arguments (curve name, point) each mode takes
modes = {"info": 1, "pick": 1, "decode": 2, "extract": 2, "bench": 1}


def argparse():
  # Custom parsing in the same style as the rest of the command line tools
  av = sys.argv[1:]
  if not av or any(a.lower() in ('-h', '--help') for a in av):
    first, rest = cmdhelp.rstrip().split('\n', 1)
    if sys.stdout.isatty():
      print(f'\x1B[1;44m{first:78}\x1B[0m\n{rest}')
    else:
      print(f'{first}\n{rest}')
    sys.exit(0)
  if any(a.lower() in ('-v', '--version') for a in av):
    print(cmdhelp.split('\n')[0])
    sys.exit(0)
  args = Args()
  if av[0] not in modes:
    sys.stderr.write(f'{hdrhelp}\nInvalid or missing command ({"/".join(modes)}).\n')
    sys.exit(1)
  args.mode = av[0]
  aiter = iter(av[1:])
  for a in aiter:
    if not a.startswith('-'):
      args.files.append(a)
      continue
    argvar = next((k for k, v in modeargs.items() if a.lower() in v), None)
    if argvar is None:
      sys.stderr.write(f'{hdrhelp}\nUnknown argument: edcurve {args.mode} {a}\n')
      sys.exit(1)
    var = getattr(args, argvar)
    if isinstance(var, list):
      try:
        var.append(next(aiter))
      except StopIteration:
        sys.stderr.write(f'{hdrhelp}\nArgument parameter missing: edcurve {args.mode} {a} …\n')
        sys.exit(1)
    else:
      setattr(args, argvar, True)
  if len(args.files) != modes[args.mode]:
    sys.stderr.write(f'{hdrhelp}\nWrong number of arguments for edcurve {args.mode}\n')
    sys.exit(1)
  return args


def get_curve(args) -> Curve:
  try:
    param = param_by_name(args.files[0])
  except KeyError as e:
    raise ValueError(e.args[0])
  return Curve(param, full_group=bool(args.full))


def get_stream(args) -> CipherStream:
  return CipherStream(args.seed[-1].encode() if args.seed else None)


def main_info(args):
  curve = get_curve(args)
  p = curve.param
  print(f"{curve!r}")
  print(f"  P = {p.P} ({p.P.bit_length()} bits)")
  print(f"  a = {p.A}, d = {p.D}, cofactor {p.R}")
  print(f"  Q = {p.Q}")
  print(f"  point length {curve.point_len()} bytes, secret length {curve.secret_len()} bytes")
  print(f"  embeddable data {curve.pick_len()} bytes per point")
  print(f"  uniform encoding: {type(curve.hide).__name__ if curve.hide else 'none'}")
  print(f"  base point {curve.base}")


def main_pick(args):
  curve = get_curve(args)
  rand = get_stream(args)
  data = args.data[-1].encode() if args.data else None
  while True:
    P, data = curve.pick_point(data, rand)
    print(P)
    if not data:
      break


def decode_hex(curve: Curve, s: str, check=False):
  try:
    b = bytes.fromhex(s)
  except ValueError:
    raise ValueError(f"Invalid hex string {s!r}")
  return curve.decode_point(b, check=check)


def main_decode(args):
  curve = get_curve(args)
  P = decode_hex(curve, args.files[1], bool(args.check))
  print(f"x = {P.x}\ny = {P.y}")


def main_extract(args):
  curve = get_curve(args)
  P = decode_hex(curve, args.files[1])
  print(curve.data(P).decode(errors="replace"))


def main_bench(args):
  curve = get_curve(args)
  rand = CipherStream(b"benchmark")
  rounds = int(args.rounds[-1]) if args.rounds else 100
  points = []
  t0 = perf_counter()
  for i in tqdm(range(rounds), desc="pick", unit="pt", leave=False):
    points.append(curve.pick_point(b"benchmark", rand)[0])
  dur_pick = perf_counter() - t0
  encoded = [bytes(P) for P in points]
  t0 = perf_counter()
  for b in tqdm(encoded, desc="decode", unit="pt", leave=False):
    curve.decode_point(b)
  dur_decode = perf_counter() - t0
  print(f"{curve!r}: pick {rounds / dur_pick:8.1f}/s, decode {rounds / dur_decode:8.1f}/s")


handlers = {
  "info": main_info,
  "pick": main_pick,
  "decode": main_decode,
  "extract": main_extract,
  "bench": main_bench,
}


def main() -> NoReturn:
  """
  The main CLI entry point.

  System exit codes:
  * 0 The requested function was completed successfully
  * 1 CLI argument error
  * 2 Interrupted
  * 10 Invalid input (malformed points, unknown curves, ...)

  :raises SystemExit: on normal exit or any expected error
  :raises Exception: on unexpected error, or on any error with `--debug`
  """
  colorama.init()
  args = argparse()
  if args.debug:
    logging.basicConfig(level=logging.DEBUG)
    handlers[args.mode](args)  # --debug makes us not catch errors
    sys.exit(0)
  try:
    handlers[args.mode](args)
  except ValueError as e:
    sys.stderr.write(f"Error: {e}\n")
    sys.exit(10)
  except KeyboardInterrupt:
    sys.stderr.write("Interrupted.\n")
    sys.exit(2)
  sys.exit(0)


if __name__ == "__main__":
  main()
