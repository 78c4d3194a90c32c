import json

import pytest

from meterman_lcd import ConfigError, create_decoder, load_config
from meterman_lcd.const import M_ALL
from meterman_lcd.geometry import Point

from conftest import BBOX, OFF_LEVEL, ON_LEVEL, WIDTH, draw

DESCRIPTION = {
    "options": {"threshold_percent": 40, "history": 3},
    "offset": [5, 2],
    "templates": [{"name": "A", "bbox": list(BBOX), "width": WIDTH, "dp": [65, 95]}],
    "digits": [
        {"template": "A", "x": 0, "y": 0, "min": OFF_LEVEL, "max": ON_LEVEL},
        {"template": "A", "x": 70, "y": 0},
    ],
}


def test_defaults_filled():
    conf = load_config({"templates": [{"name": "A", "bbox": list(BBOX), "width": WIDTH}]})
    assert conf["options"]["threshold_percent"] == 50
    assert conf["options"]["max_levels"] == 100
    assert conf["options"]["saved_levels"] == 50
    assert conf["offset"] == [0, 0]
    assert conf["digits"] == []
    assert conf["templates"][0]["dp"] == []


def test_create_from_json(tmp_path):
    path = tmp_path / "meter.json"
    path.write_text(json.dumps(DESCRIPTION))
    for src in (str(path), json.dumps(DESCRIPTION), DESCRIPTION):
        dec = create_decoder(src)
        assert dec.threshold == 40
        assert dec.history == 3
        assert [d.pos for d in dec.digits] == [Point(5, 2), Point(75, 2)]
        assert dec.digits[0].has_dp
        lev = dec.levels(dec.digits[0])
        assert lev.min == OFF_LEVEL
        assert lev.segments[0].max.value == ON_LEVEL


def test_created_decoder_decodes():
    desc = dict(DESCRIPTION, offset=[0, 0])
    dec = create_decoder(desc)
    dec.calibrate_from_image(draw(dec, [M_ALL, M_ALL]), "88")
    assert dec.decode(draw(dec, [M_ALL, M_ALL], dps=[True, False])).text == "8.8"


def test_overrides():
    assert create_decoder(DESCRIPTION, inverse=True).inverse


@pytest.mark.parametrize("change", [
    {"options": {"threshold_percent": 150}},
    {"options": {"max_levels": 5, "saved_levels": 10}},
    {"options": {"on_margin": -1}},
    {"offset": [1]},
    {"templates": [{"name": "A", "bbox": list(BBOX)}]},
    {"templates": [{"name": "A", "bbox": [1, 2, 3], "width": WIDTH}]},
    {"templates": [{"name": "A", "bbox": list(BBOX), "width": WIDTH, "dp": [1]}]},
    {"templates": [{"name": "A", "bbox": list(BBOX), "width": WIDTH}] * 2},
    {"digits": [{"template": "B", "x": 0, "y": 0}]},
    {"digits": [{"template": "A", "x": 0, "y": 0, "min": 10}]},
])
def test_bad_descriptions(change):
    with pytest.raises(ConfigError):
        create_decoder(dict(DESCRIPTION, **change))


def test_bad_json():
    with pytest.raises(ConfigError):
        load_config("{not json")
    with pytest.raises(ConfigError):
        load_config("[1, 2]")
