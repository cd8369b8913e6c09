import logging

import pytest

from pcbmill.options import (
    BoardSide,
    ErrorCode,
    MillFeedDirection,
    OptionsError,
    help_text,
    maybe_throw,
    parse,
    parse_comma_separated,
    parse_files,
    parse_unit,
)


@pytest.fixture(autouse=True)
def in_empty_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_unknown_option():
    with pytest.raises(OptionsError) as info:
        parse(["--foo"])
    assert info.value.code == 101


def test_available_drills():
    values = parse(["--drills-available", "5mm", "--drills-available", "15mm"])
    drills = values.get("drills-available")
    assert [d.to("m").magnitude for d in drills] == pytest.approx([0.005, 0.015])


def test_offset():
    values = parse(["--offset", "5mm"])
    assert values.count("offset") == 1
    assert values.get("offset") == 0
    assert values.get("mill-diameters") == [[parse_unit("10mm", "length")]]


def test_mill_diameters():
    values = parse("--mill-diameters 1mm,2mm 3mm --mill-diameters 4mm".split())
    expected = [
        [parse_unit("1mm", "length"), parse_unit("2mm", "length")],
        [parse_unit("3mm", "length")],
        [parse_unit("4mm", "length")],
    ]
    assert values.get("mill-diameters") == expected


def test_milling_overlap():
    assert parse([]).get("milling-overlap") == parse_unit("50%", "percent")
    assert parse(["--milling-overlap", "10%"]).get("milling-overlap") == parse_unit("10%", "percent")
    assert parse(["--milling-overlap", "1mm"]).get("milling-overlap") == parse_unit("1mm", "length")
    with pytest.raises(OptionsError):
        parse(["--milling-overlap", "1rpm"])


def test_parse_unit_values():
    assert parse_unit("0.5", "length") == 0.5
    assert parse_unit("1in", "length").to("mm").magnitude == pytest.approx(25.4)
    assert parse_unit("50in/min", "velocity").to("inch/minute").magnitude == pytest.approx(50)
    assert parse_unit("1 ms", "time").to("s").magnitude == pytest.approx(0.001)


def test_parse_unit_wrong_dimension():
    with pytest.raises(ValueError):
        parse_unit("5mm", "time")


def test_parse_comma_separated():
    assert parse_comma_separated(["a,b", "c"], "str") == [["a", "b"], ["c"]]


def test_default_tolerance():
    assert parse([]).get("tolerance") == pytest.approx(0.0004)
    assert parse(["--metric"]).get("tolerance") == pytest.approx(0.01016)


def test_g64_becomes_tolerance():
    assert parse(["--g64", "0.002"]).get("tolerance") == pytest.approx(0.002)


def test_tolerance_and_g64_conflict():
    with pytest.raises(OptionsError) as info:
        parse(["--tolerance", "0.001", "--g64", "0.002"])
    assert info.value.code == ErrorCode.BOTH_TOLERANCE_G64


def test_ignore_warnings_keeps_tolerance():
    values = parse(["--tolerance", "0.001", "--g64", "0.002", "--ignore-warnings"])
    assert values.get("tolerance") == pytest.approx(0.001)


def test_basename():
    values = parse(["--basename", "board"])
    assert values.get("front-output") == "board_front.ngc"
    assert values.get("milldrill-output") == "board_milldrill.ngc"


def test_bridgesnum_reset_without_bridges():
    assert parse([]).get("bridgesnum") == 0
    assert parse(["--bridges", "2mm"]).get("bridgesnum") == 2


def test_milldrill_deprecated():
    assert parse([]).get("min-milldrill-hole-diameter") == float("inf")
    assert parse(["--milldrill"]).get("min-milldrill-hole-diameter") == 0


def test_implicit_and_explicit_bools():
    assert parse(["--voronoi"]).get("voronoi") is True
    assert parse(["--voronoi=false"]).get("voronoi") is False
    assert parse(["--mirror-yaxis", "true"]).get("mirror-yaxis") is True


def test_defaulted_flags():
    values = parse(["--zsafe", "0.1"])
    assert values.defaulted("output-dir") is True
    assert values.defaulted("zsafe") is False
    assert values.count("zwork") == 0


def test_negative_value_on_command_line():
    assert parse(["--zwork", "-0.1"]).get("zwork") == pytest.approx(-0.1)


def test_enum_options():
    assert parse(["--drill-side", "front"]).get("drill-side") is BoardSide.FRONT
    assert parse([]).get("mill-feed-direction") is MillFeedDirection.ANY
    with pytest.raises(OptionsError) as info:
        parse(["--drill-side", "sideways"])
    assert info.value.code == 101


def test_repeated_scalar_option():
    with pytest.raises(OptionsError) as info:
        parse(["--zsafe", "1", "--zsafe", "2"])
    assert info.value.code == 101


def test_config_file_and_command_line(in_empty_dir):
    (in_empty_dir / "millproject").write_text("zsafe=0.1\n# comment\nmetric=true\n")
    values = parse(["--zsafe", "0.2"])
    assert values.get("zsafe") == pytest.approx(0.2)
    assert values.get("metric") is True


def test_later_config_file_wins(in_empty_dir):
    (in_empty_dir / "a.cfg").write_text("zsafe=1\n")
    (in_empty_dir / "b.cfg").write_text("zsafe=2\n")
    assert parse(["--config", "a.cfg,b.cfg"]).get("zsafe") == pytest.approx(2.0)


def test_noconfigfile(in_empty_dir):
    (in_empty_dir / "millproject").write_text("zsafe=0.1\n")
    assert parse(["--noconfigfile"]).count("zsafe") == 0


def test_missing_explicit_config():
    with pytest.raises(OptionsError) as info:
        parse(["--config", "missing.cfg"])
    assert info.value.code == ErrorCode.INVALID_PARAMETER


def test_unknown_config_key(in_empty_dir):
    (in_empty_dir / "bad.cfg").write_text("nonsense=1\n")
    with pytest.raises(OptionsError) as info:
        parse(["--config", "bad.cfg"])
    assert info.value.code == ErrorCode.INVALID_PARAMETER


def test_parse_files_directly(in_empty_dir):
    (in_empty_dir / "extra.cfg").write_text("zchange=3\n")
    values = parse([])
    parse_files(values, ["extra.cfg"], False)
    assert values.get("zchange") == pytest.approx(3.0)


def test_maybe_throw_raises():
    values = parse([])
    with pytest.raises(OptionsError) as info:
        maybe_throw(values, "boom", ErrorCode.NO_ZSAFE)
    assert info.value.code == ErrorCode.NO_ZSAFE
    assert str(info.value) == "boom"


def test_maybe_throw_ignored(caplog):
    values = parse(["--ignore-warnings"])
    with caplog.at_level(logging.WARNING):
        result = maybe_throw(values, "boom", ErrorCode.NO_ZSAFE)
    assert result is None
    assert "Ignoring error code 3: boom" in caplog.text


def test_help_text():
    text = help_text()
    assert text.startswith("pcbmill")
    assert "--mill-diameters" in text
    assert "command line only options:" in text