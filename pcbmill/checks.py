"""Validation of parsed options before any work is done."""

from __future__ import annotations

import logging
import math
from typing import Any

from pcbmill.options import (
    ErrorCode,
    MillFeedDirection,
    OptionValues,
    maybe_throw,
)

logger = logging.getLogger(__name__)

_REFERENCE_UNITS = {
    "length": "inch",
    "velocity": "inch / minute",
    "time": "millisecond",
    "rpm": "revolutions_per_minute",
}


class MissingOptionError(LookupError):
    """A check needed the value of an option that was not given."""


def _raw(values: OptionValues, name: str) -> Any:
    value = values.get(name)
    if value is None:
        raise MissingOptionError(f"option '--{name}' has no value")
    return value


def _is_bare(value: Any) -> bool:
    return isinstance(value, (int, float))


def _in(values: OptionValues, name: str, kind: str, unit: float = 1.0) -> float:
    """Value of ``name`` in the reference unit of ``kind``.

    A bare number is scaled by ``unit``; a quantity is converted.
    """
    value = _raw(values, name)
    if _is_bare(value):
        return float(value) * unit
    return float(value.to(_REFERENCE_UNITS[kind]).magnitude)


def _number(values: OptionValues, name: str) -> float:
    """The number of ``name`` as it was written, ignoring its unit."""
    value = _raw(values, name)
    if _is_bare(value):
        return float(value)
    return float(value.magnitude)


def _unit_factor(values: OptionValues) -> float:
    return 1 / 25.4 if values.get("metric") else 1.0


def check_generic_parameters(values: OptionValues) -> None:
    """Check the options common to every kind of work."""
    unit = _unit_factor(values)

    if _in(values, "spinup-time", "time") < 0:
        maybe_throw(values, "spinup-time can't be negative!", ErrorCode.NEGATIVE_SPINUP)

    if values.count("spindown-time") and _in(values, "spindown-time", "time") < 0:
        maybe_throw(values, "spindown-time can't be negative!", ErrorCode.NEGATIVE_SPINDOWN)

    if values.count("g64"):
        logger.warning("g64 is deprecated, use tolerance.")

    if not values.get("mirror-absolute"):
        maybe_throw(values, "mirror-absolute is deprecated, it must be true.",
                    ErrorCode.FALSE_MIRROR_ABSOLUTE)

    tolerance_threshold = 0.2 if values.get("metric") else 0.008
    if values.count("tolerance"):
        tolerance = float(_raw(values, "tolerance"))
        if tolerance > tolerance_threshold:
            logger.warning(
                "Warning: high tolerance value (allowed deviation from toolpath) given."
            )
        elif tolerance == 0:
            logger.warning(
                "Warning: Deviation from commanded toolpath set to 0 (tolerance=0). "
                "No smooth milling is most likely!"
            )
        elif tolerance < 0:
            maybe_throw(values, "tolerance can't be negative!", ErrorCode.NEGATIVE_TOLERANCE)

    if values.count("svg"):
        logger.warning(
            "--svg is deprecated and has no effect anymore, use --vectorial to generate SVGs."
        )

    if values.count("drill") and not (
        values.count("front") or values.count("back") or values.count("outline")
    ):
        logger.warning(
            "Warning: Board dimensions unknown. Gcode for drilling will be probably misaligned."
        )

    if _raw(values, "tile-x") < 1:
        maybe_throw(values, "tile-x can't be negative!", ErrorCode.NEGATIVE_TILE_X)
    if _raw(values, "tile-y") < 1:
        maybe_throw(values, "tile-y can't be negative!", ErrorCode.NEGATIVE_TILE_Y)

    if not values.count("zsafe"):
        maybe_throw(values, "Error: Safety height not specified.", ErrorCode.NO_ZSAFE)

    if not values.count("zchange"):
        maybe_throw(values, "Error: Tool changing height not specified.", ErrorCode.NO_ZCHANGE)

    if values.get("al-front") or values.get("al-back"):
        if not values.count("software"):
            maybe_throw(
                values,
                "Error: unspecified or unsupported software, please specify a supported "
                "software (linuxcnc, mach3, mach4 or custom).",
                ErrorCode.NO_SOFTWARE,
            )

        if not values.count("al-x"):
            maybe_throw(values, "Error: autoleveller probe width x not specified.",
                        ErrorCode.NO_AL_X)
        elif _in(values, "al-x", "length", unit) <= 0:
            maybe_throw(values, "Error: al-x < 0!", ErrorCode.NEGATIVE_AL_X)

        if not values.count("al-y"):
            maybe_throw(values, "Error: autoleveller probe width y not specified.",
                        ErrorCode.NO_AL_Y)
        elif _in(values, "al-y", "length", unit) <= 0:
            maybe_throw(values, "Error: al-y < 0!", ErrorCode.NEGATIVE_AL_Y)

        if not values.count("al-probefeed"):
            maybe_throw(values, "Error: autoleveller probe feed rate not specified.",
                        ErrorCode.NO_AL_PROBEFEED)
        elif _in(values, "al-probefeed", "velocity", unit) <= 0:
            maybe_throw(values, "Error: al-probefeed < 0!", ErrorCode.NEGATIVE_PROBEFEED)

    if values.get("mill-feed-direction") is not MillFeedDirection.ANY and values.get("tsp-2opt"):
        maybe_throw(values, "Error: Can't use tsp-2opt together with mill-feed-direction",
                    ErrorCode.INVALID_PARAMETER)


def check_milling_parameters(values: OptionValues) -> None:
    """Check the isolation milling options, if a front or back layer is given."""
    unit = _unit_factor(values)
    if not (values.count("front") or values.count("back")):
        return

    if not values.count("zwork"):
        maybe_throw(values, "Error: --zwork not specified.", ErrorCode.NO_ZWORK)
    elif _number(values, "zwork") > 0:
        logger.warning("Warning: Engraving depth (--zwork) is greater than zero!")

    if not values.get("vectorial"):
        maybe_throw(values, "Error: --vectorial is mandatory", ErrorCode.INVALID_PARAMETER)

    if not values.count("mill-diameters"):
        maybe_throw(values, "Error: no --mill-diameters specified.", ErrorCode.NO_OFFSET)

    if not values.count("mill-feed"):
        maybe_throw(values, "Error: Milling feed [i/m or mm/m] not specified.",
                    ErrorCode.NO_MILL_FEED)

    if not values.count("mill-speed"):
        maybe_throw(values, "Error: Milling speed [rpm] not specified.",
                    ErrorCode.NO_MILL_SPEED)

    if _in(values, "zsafe", "length", unit) <= _in(values, "zwork", "length", unit):
        maybe_throw(
            values,
            "Error: The safety height --zsafe is lower than the milling height --zwork. "
            "Are you sure this is correct?",
            ErrorCode.ZSAFE_LOWER_ZWORK,
        )

    if _number(values, "mill-feed") <= 0:
        maybe_throw(values, "Error: Negative or equal to 0 milling feed (--mill-feed).",
                    ErrorCode.NEGATIVE_MILL_FEED)

    if values.count("mill-vertfeed") and _in(values, "mill-vertfeed", "velocity", unit) <= 0:
        maybe_throw(values,
                    "Error: Negative or equal to 0 vertical milling feed (--mill-vertfeed).",
                    ErrorCode.NEGATIVE_MILL_VERTFEED)

    if values.count("mill-infeed") and _in(values, "mill-infeed", "length", unit) <= 0.0:
        maybe_throw(values, "Error: The milling infeed --mill-infeed. seems too low.",
                    ErrorCode.LOW_MILL_INFEED)

    if _number(values, "mill-speed") < 0:
        maybe_throw(values, "Error: --mill-speed < 0.", ErrorCode.NEGATIVE_MILL_SPEED)


def _milldrilling(values: OptionValues) -> bool:
    return bool(values.count("drill")) and (
        _in(values, "min-milldrill-hole-diameter", "length") < math.inf
    )


def check_cutting_parameters(values: OptionValues) -> None:
    """Check the outline cutting options, if an outline is cut or holes milled."""
    unit = _unit_factor(values)
    if not (values.count("outline") or _milldrilling(values)):
        return

    if not values.count("zcut"):
        maybe_throw(values, "Error: Board cutting depth (--zcut) not specified.",
                    ErrorCode.NO_ZCUT)
    elif _in(values, "zcut", "length", unit) > 0:
        maybe_throw(values, "Error: Cutting depth (--zcut) is greater than zero!",
                    ErrorCode.NEGATIVE_ZWORK)

    if not values.count("cutter-diameter"):
        maybe_throw(values, "Error: Cutter diameter not specified.",
                    ErrorCode.NO_CUTTER_DIAMETER)

    if not values.count("cut-feed"):
        maybe_throw(values, "Error: Board cutting feed (--cut-feed) not specified.",
                    ErrorCode.NO_CUT_FEED)

    if not values.count("cut-speed"):
        maybe_throw(values, "Error: Board cutting spindle RPM (--cut-speed) not specified.",
                    ErrorCode.NO_CUT_SPEED)

    if not values.count("cut-infeed"):
        maybe_throw(values, "Error: Board cutting infeed (--cut-infeed) not specified.",
                    ErrorCode.NO_CUT_INFEED)

    if _in(values, "zsafe", "length", unit) <= _in(values, "zcut", "length", unit):
        maybe_throw(values,
                    "Error: The safety height --zsafe is lower than the cutting height --zcut!",
                    ErrorCode.ZSAFE_LOWER_ZCUT)

    if _in(values, "cut-feed", "velocity", unit) <= 0:
        maybe_throw(values, "Error: The cutting feed --cut-feed is <= 0.",
                    ErrorCode.NEGATIVE_CUT_FEED)

    if values.count("cut-vertfeed") and _in(values, "cut-vertfeed", "velocity", unit) <= 0:
        maybe_throw(values, "Error: The cutting vertical feed --cut-vertfeed is <= 0.",
                    ErrorCode.NEGATIVE_CUT_VERTFEED)

    if _in(values, "cut-speed", "rpm") < 0:
        maybe_throw(values, "Error: The cutting spindle speed --cut-speed is lower than 0.",
                    ErrorCode.NEGATIVE_SPINDLE_SPEED)

    if _in(values, "cut-infeed", "length", unit) < 0.001:
        maybe_throw(values, "Error: The cutting infeed --cut-infeed. seems too low.",
                    ErrorCode.LOW_CUT_INFEED)

    if _in(values, "bridges", "length", unit) < 0:
        maybe_throw(values, "Error: negative bridge value.", ErrorCode.NEGATIVE_BRIDGE)

    if values.count("cut-front"):
        logger.warning("cut-front is deprecated, use cut-side.")
        if not values.defaulted("cut-side"):
            maybe_throw(values, "You can't specify both cut-front and cut-side!",
                        ErrorCode.BOTH_CUT_FRONT_SIDE)


def check_drilling_parameters(values: OptionValues) -> None:
    """Check the drilling options, if a drill file is given."""
    unit = _unit_factor(values)
    if not values.count("drill"):
        return

    if not values.count("zdrill"):
        maybe_throw(values, "Error: Drilling depth (--zdrill) not specified.",
                    ErrorCode.NO_ZDRILL)

    if _in(values, "zsafe", "length", unit) <= _in(values, "zdrill", "length", unit):
        maybe_throw(values,
                    "Error: The safety height --zsafe is lower than the drilling height --zdrill!",
                    ErrorCode.ZSAFE_LOWER_ZDRILL)

    if not values.count("zchange"):
        maybe_throw(values, "Error: Drill bit changing height (--zchange) not specified.",
                    ErrorCode.NO_ZCHANGE)
    elif not values.get("zchange-absolute") and (
        _in(values, "zchange", "length", unit) <= _in(values, "zdrill", "length", unit)
    ):
        maybe_throw(values,
                    "Error: The safety height --zsafe is lower than the tool change height "
                    "--zchange!",
                    ErrorCode.ZSAFE_LOWER_ZCHANGE)

    if not values.count("drill-feed"):
        maybe_throw(values, "Error:: Drilling feed (--drill-feed) not specified.",
                    ErrorCode.NO_DRILL_FEED)
    elif _in(values, "drill-feed", "velocity", unit) <= 0:
        maybe_throw(values, "Error: The drilling feed --drill-feed is <= 0.",
                    ErrorCode.NEGATIVE_DRILL_FEED)

    if not values.count("drill-speed"):
        maybe_throw(values, "Error: Drilling spindle RPM (--drill-speed) not specified.",
                    ErrorCode.NO_DRILL_SPEED)
    elif _in(values, "drill-speed", "rpm") < 0:
        maybe_throw(values, "Error: --drill-speed < 0.", ErrorCode.NEGATIVE_DRILL_SPEED)

    if values.count("drill-front"):
        logger.warning("drill-front is deprecated, use drill-side.")
        if not values.defaulted("drill-side"):
            maybe_throw(values, "You can't specify both drill-front and drill-side!",
                        ErrorCode.BOTH_DRILL_FRONT_SIDE)


def check_parameters(values: OptionValues) -> None:
    """Run every check; a value that is needed but missing is an invalid parameter."""
    try:
        check_generic_parameters(values)
        check_milling_parameters(values)
        check_cutting_parameters(values)
        check_drilling_parameters(values)
    except (MissingOptionError, ValueError):
        maybe_throw(values, "Error: Invalid parameter. :-(", ErrorCode.INVALID_PARAMETER)