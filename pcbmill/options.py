"""Command line and configuration file options for the milling tool."""

from __future__ import annotations

import copy
import enum
import logging
import math
import re
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

import pint

logger = logging.getLogger(__name__)

_PACKAGE_STRING = "pcbmill 2.5.0"

_UREG = pint.UnitRegistry()
if "percent" not in _UREG:
    _UREG.define("percent = 0.01")


class ErrorCode(enum.IntEnum):
    """Exit codes for invalid or missing options."""

    OK = 0
    NO_ZWORK = 1
    NO_CUTTER_DIAMETER = 2
    NO_ZSAFE = 3
    NO_OFFSET = 4
    NO_ZCUT = 5
    NO_CUT_FEED = 6
    NO_CUT_SPEED = 7
    NO_CUT_INFEED = 8
    NO_ZDRILL = 9
    NO_ZCHANGE = 10
    NO_DRILL_FEED = 11
    NO_DRILL_SPEED = 12
    NO_MILL_FEED = 13
    NO_MILL_SPEED = 14
    ZSAFE_LOWER_ZWORK = 15
    NEGATIVE_MILL_FEED = 16
    NEGATIVE_MILL_SPEED = 17
    ZSAFE_LOWER_ZDRILL = 18
    ZSAFE_LOWER_ZCHANGE = 19
    NEGATIVE_DRILL_FEED = 20
    ZSAFE_LOWER_ZCUT = 21
    NEGATIVE_CUT_FEED = 22
    NEGATIVE_SPINDLE_SPEED = 23
    LOW_CUT_INFEED = 24
    NO_OUTLINE_WIDTH = 25
    NEGATIVE_OUTLINE_WIDTH = 26
    ZERO_OUTLINE_WIDTH = 27
    NEGATIVE_DRILL_SPEED = 28
    NO_SOFTWARE = 29
    NO_AL_X = 30
    NO_AL_Y = 31
    NO_AL_PROBEFEED = 32
    NEGATIVE_BRIDGE = 33
    BRIDGE_NO_OPTIMISE = 34
    NEGATIVE_AL_X = 35
    NEGATIVE_AL_Y = 36
    NEGATIVE_PROBEFEED = 37
    NEGATIVE_CUT_VERTFEED = 39
    NEGATIVE_MILL_VERTFEED = 40
    NEGATIVE_TILE_X = 41
    NEGATIVE_TILE_Y = 42
    BOTH_DRILL_FRONT_SIDE = 43
    UNKNOWN_DRILL_SIDE = 44
    BOTH_CUT_FRONT_SIDE = 45
    UNKNOWN_CUT_SIDE = 46
    VORONOI_NO_VECTORIAL = 47
    VORONOI_NO_OUTLINE = 48
    BOTH_TOLERANCE_G64 = 49
    NEGATIVE_TOLERANCE = 50
    NEGATIVE_ZWORK = 51
    NEGATIVE_SPINUP = 52
    NEGATIVE_SPINDOWN = 53
    FALSE_MIRROR_ABSOLUTE = 54
    LOW_MILL_INFEED = 55
    INVALID_PARAMETER = 100
    UNKNOWN_PARAMETER = 101


class OptionsError(Exception):
    """An invalid option, carrying the exit code to report."""

    def __init__(self, message: str, code: ErrorCode | int) -> None:
        super().__init__(message)
        self.code = ErrorCode(code)


class BoardSide(enum.Enum):
    """Side of the board to work from."""

    AUTO = "auto"
    FRONT = "front"
    BACK = "back"


class MillFeedDirection(enum.Enum):
    """Direction in which all milling should occur."""

    ANY = "any"
    CLIMB = "climb"
    CONVENTIONAL = "conventional"


class Software(enum.Enum):
    """Destination software of the generated code."""

    LINUXCNC = "linuxcnc"
    MACH3 = "mach3"
    MACH4 = "mach4"
    CUSTOM = "custom"


_NUMBER_RE = re.compile(
    r"(?P<number>[-+]?(?:inf(?:inity)?|(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?))\s*(?P<unit>.*)",
    re.IGNORECASE,
)

_REFERENCE_UNITS = {
    "length": "inch",
    "velocity": "inch / minute",
    "time": "millisecond",
    "rpm": "revolutions_per_minute",
    "percent": "percent",
}


def parse_unit(text: str, kind: str) -> Any:
    """Parse a number with an optional unit.

    ``kind`` is one of ``length``, ``velocity``, ``time``, ``rpm`` and
    ``percent``.  A bare number is returned as a float; a number with a unit
    becomes a pint quantity, which must have the dimension of ``kind``.
    """
    if kind not in _REFERENCE_UNITS:
        raise ValueError(f"Unknown unit kind: {kind}")
    match = _NUMBER_RE.fullmatch(text.strip())
    if match is None:
        raise ValueError(f"Can't parse {text!r} as a {kind}")
    number = float(match["number"])
    unit_text = match["unit"].strip()
    if not unit_text:
        return number
    unit_text = re.sub(r"\bin\b", "inch", unit_text.replace("%", " percent "))
    try:
        quantity = _UREG.Quantity(number, _UREG.parse_units(unit_text.strip()))
        quantity.to(_REFERENCE_UNITS[kind])
    except Exception as error:
        raise ValueError(f"Can't parse {text!r} as a {kind}") from error
    return quantity


def _as_inch(value: Any) -> float:
    if isinstance(value, _UREG.Quantity):
        return float(value.to("inch").magnitude)
    return float(value)


def _parse_bool(token: str) -> bool:
    lowered = token.strip().lower()
    if lowered in ("true", "yes", "on", "1"):
        return True
    if lowered in ("false", "no", "off", "0"):
        return False
    raise ValueError(f"the argument {token!r} is not a valid boolean")


def _parse_enum(cls: type[enum.Enum], token: str) -> enum.Enum:
    try:
        return cls(token.strip().lower())
    except ValueError:
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"invalid value {token!r}; valid choices are {choices}") from None


def _parse_scalar(token: str, kind: str) -> Any:
    if kind in _REFERENCE_UNITS:
        return parse_unit(token, kind)
    if kind == "str":
        return token
    if kind == "bool":
        return _parse_bool(token)
    if kind == "int":
        return int(token)
    if kind == "uint":
        number = int(token)
        if number < 0:
            raise ValueError(f"the argument {token!r} must not be negative")
        return number
    if kind == "float":
        return float(token)
    if kind == "overlap":
        try:
            return parse_unit(token, "length")
        except ValueError:
            return parse_unit(token, "percent")
    if kind == "board_side":
        return _parse_enum(BoardSide, token)
    if kind == "feed_direction":
        return _parse_enum(MillFeedDirection, token)
    if kind == "software":
        return _parse_enum(Software, token)
    raise ValueError(f"Unknown option kind: {kind}")


def parse_comma_separated(values: Iterable[str], kind: str) -> list[list[Any]]:
    """Split each value at commas and parse every part as ``kind``."""
    return [[_parse_scalar(part, kind) for part in value.split(",")] for value in values]


_UNSET = object()
_VECTOR_KINDS = frozenset({"length_list", "str_list", "str_vector", "drills"})


@dataclass(frozen=True)
class _Option:
    name: str
    kind: str
    description: str
    default: Any = _UNSET
    implicit: Any = _UNSET
    multitoken: bool = False
    short: str | None = None


def _opt(name: str, kind: str, description: str, **kwargs: Any) -> _Option:
    return _Option(name, kind, description, **kwargs)


def _switch(name: str, description: str, default: Any = False) -> _Option:
    return _Option(name, "bool", description, default=default, implicit=True)


_CLI_GROUP = (
    "command line only options",
    [
        _switch("noconfigfile", "ignore any configuration file"),
        _opt("config", "str_list", "list of comma-separated config files",
             default=[["millproject"]], multitoken=True),
        _opt("help", "flag", "produce help message", short="?"),
        _opt("version", "flag", "show the current software version", short="V"),
    ],
)

_CFG_GROUPS = [
    ("Drilling options, for making holes in the PCB", [
        _opt("drill", "str", "Excellon drill file"),
        _switch("milldrill", "[DEPRECATED] Use min-milldrill-hole-diameter=0 instead"),
        _opt("milldrill-diameter", "length", "diameter of the end mill used for drilling with --milldrill"),
        _opt("min-milldrill-hole-diameter", "length",
             "minimum hole width or milldrilling.  Holes smaller than this are drilled.  "
             "This implies milldrill", default=math.inf),
        _opt("zdrill", "length", "drilling depth"),
        _opt("zmilldrill", "length", "milldrilling depth"),
        _opt("drill-feed", "velocity", "drill feed in [i/m] or [mm/m]"),
        _opt("drill-speed", "rpm", "spindle rpm when drilling"),
        _opt("drill-front", "bool",
             "[DEPRECATED, use drill-side instead] drill through the front side of board",
             implicit=True),
        _opt("drill-side", "board_side",
             "drill side; valid choices are front, back or auto (default)", default=BoardSide.AUTO),
        _opt("drills-available", "drills", "list of drills available", default=[], multitoken=True),
        _switch("onedrill", "use only one drill bit size"),
        _opt("drill-output", "str", "output file for drilling", default="drill.ngc"),
        _switch("nog91-1", "do not explicitly set G91.1 in drill headers"),
        _switch("nog81", "replace G81 with G0+G1"),
        _switch("nom6", "do not emit M6 on tool changes"),
        _opt("milldrill-output", "str", "output file for milldrilling", default="milldrill.ngc"),
    ]),
    ("Milling options, for milling traces into the PCB", [
        _opt("front", "str", "front side RS274-X .gbr"),
        _opt("back", "str", "back side RS274-X .gbr"),
        _switch("voronoi", "generate voronoi regions"),
        _opt("offset", "length",
             "Note: Prefer to use --mill-diameters and --milling-overlap if that's what you mean.  "
             "An optional offset to add to all traces, useful if the bit has a little slop that "
             "you want to keep out of the trace.", default=0.0),
        _opt("mill-diameters", "length_list",
             "Diameters of mill bits, used in the order that they are provided.",
             default=[[0.0]], multitoken=True),
        _opt("milling-overlap", "overlap",
             "How much to overlap milling passes, from 0% to 100% or an absolute length",
             default=parse_unit("50%", "percent")),
        _opt("isolation-width", "length", "Minimum isolation width between copper surfaces", default=0.0),
        _opt("extra-passes", "int",
             "[DEPRECATED] use --isolation-width instead. Specify the the number of extra "
             "isolation passes, increasing the isolation width half the tool diameter with each pass",
             default=0),
        _opt("pre-milling-gcode", "str_vector",
             "custom gcode inserted before the start of milling each trace", default=[]),
        _opt("post-milling-gcode", "str_vector",
             "custom gcode inserted after the end of milling each trace", default=[]),
        _opt("zwork", "length", "milling depth in inches (Z-coordinate while engraving)"),
        _opt("mill-feed", "velocity", "feed while isolating in [i/m] or [mm/m]"),
        _opt("mill-vertfeed", "velocity", "vertical feed while isolating in [i/m] or [mm/m]"),
        _opt("mill-infeed", "length", "maximum milling depth; PCB may be cut in multiple passes"),
        _opt("mill-speed", "rpm", "spindle rpm when milling"),
        _opt("mill-feed-direction", "feed_direction", "In which direction should all milling occur",
             default=MillFeedDirection.ANY),
        _switch("invert-gerbers",
                "Invert polarity of front and back gerbers, causing the milling to occur inside the shapes"),
        _switch("draw-gerber-lines",
                "Draw lines in the gerber file as just lines and not as filled in shapes"),
        _switch("preserve-thermal-reliefs", "generate mill paths for thermal reliefs in voronoi mode",
                default=True),
        _opt("front-output", "str", "output file for front layer", default="front.ngc"),
        _opt("back-output", "str", "output file for back layer", default="back.ngc"),
    ]),
    ("Outline options, for cutting the PCB out of the FR4", [
        _opt("outline", "str", "pcb outline polygon RS274-X .gbr"),
        _switch("fill-outline", "accept a contour instead of a polygon as outline (enabled by default)",
                default=True),
        _opt("cutter-diameter", "length", "diameter of the end mill used for cutting out the PCB"),
        _opt("zcut", "length", "PCB cutting depth in inches"),
        _opt("cut-feed", "velocity", "PCB cutting feed in [i/m] or [mm/m]"),
        _opt("cut-vertfeed", "velocity", "PCB vertical cutting feed in [i/m] or [mm/m]"),
        _opt("cut-speed", "rpm", "spindle rpm when cutting"),
        _opt("cut-infeed", "length", "maximum cutting depth; PCB may be cut in multiple passes"),
        _opt("cut-front", "bool", "[DEPRECATED, use cut-side instead] cut from front side. ",
             implicit=True),
        _opt("cut-side", "board_side", "cut side; valid choices are front, back or auto (default)",
             default=BoardSide.AUTO),
        _opt("bridges", "length", "add bridges with the given width to the outline cut", default=0.0),
        _opt("bridgesnum", "uint", "specify how many bridges should be created", default=2),
        _opt("zbridges", "length",
             "bridges height (Z-coordinates while engraving bridges, default to zsafe) "),
        _opt("outline-output", "str", "output file for outline", default="outline.ngc"),
    ]),
    ("Optimization options, for faster PCB creation, smaller output files, and different algorithms.", [
        _opt("optimise", "length",
             "Reduce output file size by up to 40% while accepting a little loss of precision.  "
             "Larger values reduce file sizes and processing time even further.  Set to 0 to disable.",
             default=parse_unit("0.0001in", "length"), implicit=parse_unit("0.0001in", "length")),
        _switch("eulerian-paths",
                "Don't mill the same path twice if milling loops overlap.  This can save up to 50% "
                "of milling time.  Enabled by default.", default=True),
        _switch("vectorial", "enable or disable the vectorial rendering engine", default=True),
        _switch("tsp-2opt", "use TSP 2OPT to find a faster toolpath (but slows down gcode generation)",
                default=True),
        _opt("path-finding-limit", "uint",
             "Use path finding for up to this many steps in the search (more is slower but makes "
             "a faster gcode path)", default=1),
        _opt("g0-vertical-speed", "velocity", "speed of vertical G0 movements, for use in path-finding",
             default=parse_unit("50in/min", "velocity")),
        _opt("g0-horizontal-speed", "velocity",
             "speed of horizontal G0 movements, for use in path-finding",
             default=parse_unit("100in/min", "velocity")),
        _opt("backtrack", "velocity",
             "allow retracing a milled path if it's faster than retract-move-lower.  For example, "
             "set to 5in/s if you are willing to remill 5 inches of trace in order to save 1 second "
             "of milling time.", default=math.inf),
    ]),
    ("Autolevelling options, for generating gcode to automatically probe the board and adjust "
     "milling depth to the actual board height", [
        _switch("al-front", "enable the z autoleveller for the front layer"),
        _switch("al-back", "enable the z autoleveller for the back layer"),
        _opt("software", "software",
             "choose the destination software (useful only with the autoleveller). Supported "
             "programs are linuxcnc, mach3, mach4 and custom"),
        _opt("al-x", "length", "max x distance between probes"),
        _opt("al-y", "length", "max y distance bewteen probes"),
        _opt("al-probefeed", "velocity", "speed during the probing"),
        _opt("al-probe-on", "str", "execute this commands to enable the probe tool (default is M0)",
             default="(MSG, Attach the probe tool)@M0 ( Temporary machine stop. )"),
        _opt("al-probe-off", "str", "execute this commands to disable the probe tool (default is M0)",
             default="(MSG, Detach the probe tool)@M0 ( Temporary machine stop. )"),
        _opt("al-probecode", "str", "custom probe code (default is G31)", default="G31"),
        _opt("al-probevar", "uint",
             "number of the variable where the result of the probing is saved (default is 2002)",
             default=2002),
        _opt("al-setzzero", "str", "gcode for setting the actual position as zero (default is G92 Z0)",
             default="G92 Z0"),
    ]),
    ("Alignment options, useful for aligning the milling on opposite sides of the PCB", [
        _opt("x-offset", "length", "offset the origin in the x-axis by this length", default=0.0),
        _opt("y-offset", "length", "offset the origin in the y-axis by this length", default=0.0),
        _switch("zero-start", "set the starting point of the project at (0,0)"),
        _switch("mirror-absolute",
                "[DEPRECATED, must always be true] mirror back side along absolute zero instead "
                "of board center", default=True),
        _opt("mirror-axis", "length",
             "For two-sided boards, the PCB needs to be flipped along the axis x=VALUE", default=0.0),
        _opt("mirror-yaxis", "bool",
             "For two-sided boards, the PCB needs to be flipped along the y axis instead", default=False),
    ]),
    ("CNC options, common to all the milling, drilling, and cutting", [
        _opt("zsafe", "length", "safety height (Z-coordinate during rapid moves)"),
        _opt("spinup-time", "time", "time required to the spindle to reach the correct speed",
             default=parse_unit("1 ms", "time")),
        _opt("spindown-time", "time", "time required to the spindle to return to 0 rpm"),
        _opt("zchange", "length", "tool changing height"),
        _switch("zchange-absolute", "use zchange as a machine coordinates height (G53)"),
        _opt("tile-x", "int", "number of tiling columns. Default value is 1", default=1),
        _opt("tile-y", "int", "number of tiling rows. Default value is 1", default=1),
    ]),
    ("Generic options", [
        _switch("ignore-warnings", "Ignore warnings"),
        _opt("svg", "str",
             "[DEPRECATED] use --vectorial, SVGs will be generated automatically; this option has no effect"),
        _switch("metric", "use metric units for parameters. does not affect gcode output"),
        _switch("metricoutput", "use metric units for output"),
        _opt("g64", "float",
             "[DEPRECATED, use tolerance instead] maximum deviation from toolpath, overrides "
             "internal calculation"),
        _opt("tolerance", "float", "maximum toolpath tolerance"),
        _switch("nog64", "do not set an explicit g64"),
        _opt("output-dir", "str", "output directory", default=""),
        _opt("basename", "str", "prefix for default output file names"),
        _opt("preamble-text", "str", "preamble text file, inserted at the very beginning as a comment."),
        _opt("preamble", "str", "gcode preamble file, inserted at the very beginning."),
        _opt("postamble", "str", "gcode postamble file, inserted before M9 and M2."),
        _switch("no-export", "skip the exporting process"),
    ]),
]

_CFG_OPTIONS = {option.name: option for _, group in _CFG_GROUPS for option in group}
_ALL_OPTIONS = {option.name: option for option in _CLI_GROUP[1]} | _CFG_OPTIONS
_SHORT_OPTIONS = {option.short: option for option in _ALL_OPTIONS.values() if option.short}


class OptionValues:
    """Parsed option values, remembering which of them are defaults."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[Any, bool]] = {}

    def get(self, name: str, default: Any = None) -> Any:
        """Value of ``name``, or ``default`` if it has none."""
        entry = self._entries.get(name)
        return default if entry is None else entry[0]

    def count(self, name: str) -> int:
        """1 if ``name`` has a value, given or default, else 0."""
        return int(name in self._entries)

    def defaulted(self, name: str) -> bool:
        """True if ``name`` holds its default value."""
        entry = self._entries.get(name)
        return entry is not None and entry[1]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __getitem__(self, name: str) -> Any:
        return self._entries[name][0]

    def _store(self, name: str, value: Any) -> None:
        # Values given first win; only defaults may be replaced.
        if name not in self._entries or self._entries[name][1]:
            self._entries[name] = (value, False)

    def _store_all(self, values: dict[str, Any]) -> None:
        for name, value in values.items():
            self._store(name, value)

    def _assign(self, name: str, value: Any) -> None:
        self._entries[name] = (value, self.defaulted(name))

    def _set_default(self, name: str, value: Any) -> None:
        self._entries[name] = (value, True)


def _fresh_values() -> OptionValues:
    values = OptionValues()
    for option in _ALL_OPTIONS.values():
        if option.default is not _UNSET:
            values._set_default(option.name, copy.deepcopy(option.default))
    return values


def maybe_throw(values: OptionValues, message: str, code: ErrorCode | int) -> None:
    """Raise :class:`OptionsError`, or only log it if warnings are ignored."""
    code = ErrorCode(code)
    if values.get("ignore-warnings", False):
        logger.warning("Ignoring error code %d: %s", int(code), message)
    else:
        raise OptionsError(message, code)


def _convert(option: _Option, occurrences: list[list[str]]) -> Any:
    if option.kind in _VECTOR_KINDS:
        tokens = [token for occurrence in occurrences for token in occurrence]
        if not tokens:
            raise ValueError(f"the required argument for option '--{option.name}' is missing")
        if option.kind == "length_list":
            return parse_comma_separated(tokens, "length")
        if option.kind == "str_list":
            return parse_comma_separated(tokens, "str")
        if option.kind == "drills":
            return [parse_unit(token, "length") for token in tokens]
        return tokens
    if len(occurrences) > 1:
        raise ValueError(f"option '--{option.name}' cannot be specified more than once")
    tokens = occurrences[0]
    if option.kind == "flag":
        return True
    if not tokens:
        if option.implicit is _UNSET:
            raise ValueError(f"the required argument for option '--{option.name}' is missing")
        return copy.deepcopy(option.implicit)
    return _parse_scalar(tokens[0], option.kind)


def _convert_all(occurrences: dict[str, list[list[str]]]) -> dict[str, Any]:
    return {name: _convert(_ALL_OPTIONS[name], occ) for name, occ in occurrences.items()}


def _is_value_token(token: str) -> bool:
    return not token.startswith("-") or re.match(r"-[\d.]", token) is not None


def _parse_command_line(args: Sequence[str]) -> dict[str, Any]:
    occurrences: dict[str, list[list[str]]] = {}
    position = 0
    while position < len(args):
        arg = args[position]
        position += 1
        if arg.startswith("--"):
            name, equals, inline = arg[2:].partition("=")
            option = _ALL_OPTIONS.get(name)
        elif arg.startswith("-") and len(arg) > 1:
            option = _SHORT_OPTIONS.get(arg[1])
            inline = arg[2:]
            equals = "=" if inline else ""
        else:
            raise ValueError("too many positional options have been specified on the command line")
        if option is None:
            raise ValueError(f"unrecognised option '{arg}'")
        if option.kind == "flag":
            if equals:
                raise ValueError(f"option '--{option.name}' does not take any arguments")
            tokens: list[str] = []
        elif equals:
            tokens = [inline]
        elif option.implicit is not _UNSET:
            tokens = []
        else:
            tokens = []
            while position < len(args) and _is_value_token(args[position]):
                tokens.append(args[position])
                position += 1
                if not option.multitoken:
                    break
            if not tokens:
                raise ValueError(f"the required argument for option '--{option.name}' is missing")
        occurrences.setdefault(option.name, []).append(tokens)
    return _convert_all(occurrences)


def _parse_config_text(text: str) -> dict[str, Any]:
    occurrences: dict[str, list[list[str]]] = {}
    section = ""
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        if line.startswith("[") and line.endswith("]"):
            section = line[1:-1].strip() + "."
            continue
        name, equals, value = line.partition("=")
        if not equals:
            raise ValueError(f"invalid config file syntax at line {number}: {raw.strip()}")
        name = section + name.strip()
        option = _CFG_OPTIONS.get(name)
        if option is None:
            raise ValueError(f"unrecognised option '{name}'")
        value = value.strip()
        tokens = [value] if value or option.implicit is _UNSET else []
        occurrences.setdefault(name, []).append(tokens)
    return _convert_all(occurrences)


def parse_files(values: OptionValues, config_files: Sequence[str], defaulted: bool) -> None:
    """Read configuration files into ``values``; later files override earlier ones.

    A missing file is an error only if the files were named explicitly.
    """
    for path in reversed(list(config_files)):
        try:
            try:
                with open(path, encoding="utf-8") as stream:
                    text = stream.read()
            except OSError:
                if not defaulted:
                    maybe_throw(values, f'Missing configuration file "{path}"',
                                ErrorCode.INVALID_PARAMETER)
                text = ""
            values._store_all(_parse_config_text(text))
        except (OptionsError, ValueError) as error:
            maybe_throw(values, f'Error parsing configuration file "{path}": {error}',
                        ErrorCode.INVALID_PARAMETER)


def _fix_values(values: OptionValues) -> None:
    # Deprecated milldrill option.
    if values.defaulted("min-milldrill-hole-diameter") and values.get("milldrill"):
        values._assign("min-milldrill-hole-diameter", 0.0)
    # Deprecated offset option.
    if values.count("offset") and values.defaulted("mill-diameters"):
        values._assign("mill-diameters", [[values.get("offset") * 2.0]])
        values._assign("offset", 0.0)
    if values.get("bridgesnum") > 0 and _as_inch(values.get("bridges")) <= 0:
        values._assign("bridgesnum", 0)


def parse(argv: Sequence[str] | None = None) -> OptionValues:
    """Parse the command line (without the program name) and configuration files."""
    args = list(sys.argv[1:] if argv is None else argv)
    values = _fresh_values()
    try:
        values._store_all(_parse_command_line(args))
    except ValueError as error:
        raise OptionsError(
            f"Error: You've supplied an invalid parameter.\nDetails: {error}",
            ErrorCode.UNKNOWN_PARAMETER,
        ) from error

    if not values.get("noconfigfile"):
        files = [name for group in values.get("config") for name in group]
        parse_files(values, files, values.defaulted("config"))

    if values.count("basename"):
        # --basename changes the default names of the output files.
        prefix = values.get("basename") + "_"
        for layer in ("front", "back", "drill", "outline", "milldrill"):
            values._assign(f"{layer}-output", f"{prefix}{layer}.ngc")

    if values.count("tolerance"):
        if values.count("g64"):
            maybe_throw(values, "You can't specify both tolerance and g64!",
                        ErrorCode.BOTH_TOLERANCE_G64)
    else:
        if values.count("g64"):
            tolerance = values.get("g64")
        else:
            tolerance = 0.0004 * (25.4 if values.get("metric") else 1)
        values._store("tolerance", float(f"{tolerance:f}"))

    _fix_values(values)
    return values


def _describe(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, list):
        return " ".join(_describe(item) for item in value)
    return str(value)


def _usage(option: _Option) -> str:
    text = f"--{option.name}"
    if option.short:
        text += f" [ -{option.short} ]"
    if option.kind == "flag":
        return text
    if option.implicit is not _UNSET:
        text += f" [=arg(={_describe(option.implicit)})]"
    else:
        text += " arg"
    if option.default is not _UNSET:
        text += f" (={_describe(option.default)})"
    return text


def help_text() -> str:
    """Describe every option, grouped as on the command line."""
    lines = [_PACKAGE_STRING, ""]
    for title, group in [_CLI_GROUP, *_CFG_GROUPS]:
        lines.append(f"{title}:")
        for option in group:
            lines.append(f"  {_usage(option):<48} {option.description}")
        lines.append("")
    return "\n".join(lines)