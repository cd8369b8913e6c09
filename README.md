# pcbmill

`pcbmill` holds the geometry and option handling used to turn printed
circuit board Gerber artwork into milling paths. It provides:

- the aperture shapes defined by Gerber: circles, rectangles, ovals,
  regular polygons, moiré and thermal primitives,
- aperture macros made from those primitives, with their polarity and
  rotation,
- circular interpolation, with single and multi quadrant arcs,
- splitting of paths that touch themselves into separate rings,
- snapping of nearly coincident points so that loops close,
- parsing and validation of the milling, drilling, cutting and
  autolevelling options.

Geometry uses [Shapely](https://shapely.readthedocs.io/) objects.
Physical quantities such as lengths, feeds and spindle speeds use
[Pint](https://pint.readthedocs.io/).

## Modules

| Module | Purpose |
| --- | --- |
| `pcbmill.shapes` | Primitive shapes: `make_regular_polygon`, `make_rectangle`, `make_line_rectangle`, `make_oval`, `linear_draw_rectangular_aperture`, `make_moire`, `make_thermal` |
| `pcbmill.arcs` | `circular_arc`, `get_angle`, and `get_all_ls` / `get_all_rings`, which split self-touching paths into rings |
| `pcbmill.merge_near_points` | `merge_near_points` and `merge_near_points_flagged` |
| `pcbmill.apertures` | `ApertureType`, `MacroPrimitive`, `Aperture`, `outline_to_shape`, `generate_apertures_map` |
| `pcbmill.geometry_convert` | Conversion between plain coordinate structures and Shapely geometry: `to_geos`, `from_geos`, `multi_polygon_from_geos` |
| `pcbmill.options` | Command line and configuration file options: `parse`, `parse_files`, `help_text`, `OptionValues`, `parse_unit`, `parse_comma_separated`, `maybe_throw`, `OptionsError`, `ErrorCode` |
| `pcbmill.checks` | Option validation: `check_parameters` and the per-area checks |

## Shapes

```python
from pcbmill.shapes import make_oval, make_thermal

# A 2 x 1 oval pad centred on the origin with a 0.4 hole,
# circles approximated by 64 segments.
pad = make_oval((0.0, 0.0), 2.0, 1.0, 0.4, 64)

# A thermal relief: outer diameter 3, inner diameter 2, gaps 0.5 wide.
relief = make_thermal((0.0, 0.0), 3.0, 2.0, 0.5, 64)
print(pad.area, relief.area)
```

All shape functions return a `shapely` `MultiPolygon`.

## Apertures

```python
from pcbmill.apertures import Aperture, ApertureType, MacroPrimitive, generate_apertures_map

apertures = {
    10: Aperture(ApertureType.CIRCLE, (0.5, 0.0, 0.0)),
    11: Aperture(ApertureType.MACRO, simplified=[
        MacroPrimitive(ApertureType.MACRO_LINE21, (1, 1.0, 0.2, 0.0, 0.0, 45.0)),
    ]),
}
shapes = generate_apertures_map(apertures, 64)
```

Each shape is centred on the origin. Empty entries, apertures of type
`NONE`, macros without primitives and macro primitives used outside a
macro are left out, and a warning is logged for them.

## Arcs

`circular_arc` turns a Gerber arc into a list of points. It works out the
arc centre itself, because the single and multi quadrant readings can
disagree:

```python
import math
from pcbmill.arcs import circular_arc

points = circular_arc((1.0, 0.0), (0.0, 1.0), (0.0, 0.0),
                      1.0, 1.0, math.pi / 2, False, 360)
```

## Closing nearly connected paths

```python
from pcbmill.merge_near_points import merge_near_points

paths = [[(0.0, 0.0), (1.0, 0.0)], [(1.0000001, 0.0), (1.0, 1.0)]]
moved = merge_near_points(paths, 0.001)  # paths are updated in place
```

## Options

`pcbmill.options.parse` takes the argument list without the program name
and also reads the configuration files named by `--config` (by default
`millproject`, which may be missing). On a problem it raises
`OptionsError`, whose `code` is an `ErrorCode`. With `--ignore-warnings`
the problem is logged instead of raised.

```python
from pcbmill.options import parse, OptionsError
from pcbmill.checks import check_parameters

try:
    values = parse(["--noconfigfile", "--zsafe", "1mm",
                    "--zchange", "10mm", "--milling-overlap", "10%"])
    check_parameters(values)
except OptionsError as error:
    print(error, int(error.code))
else:
    print(values.get("milling-overlap", None))
```

Length, velocity, time and speed values accept units, for example `5mm`,
`0.1in`, `50in/min` or `10%`; a bare number is kept as a plain float.
Giving `--offset` without `--mill-diameters` is still accepted: the mill
diameter becomes twice the offset and the offset is reset to zero.

`help_text()` returns the full option reference.

## What the package does not do

`pcbmill` does not read Gerber or Excellon files, does not combine drawn
shapes into finished layers, and does not write G-code. It has no command
line program: the option parser and checks are functions to call from
your own code.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.