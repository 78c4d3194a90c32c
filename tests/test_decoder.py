import pytest

from meterman_lcd import ConfigError, LcdDecoder, new_decoder
from meterman_lcd.const import LEVEL_RANGE, M_ALL, M_BL, M_BM, M_BR, M_MM, M_TL, M_TM, M_TR

from conftest import BBOX, OFF_LEVEL, ON_LEVEL, WIDTH, draw, make_decoder

DARKER_BACKGROUND = 0xC0
DARKER_OFF_LEVEL = LEVEL_RANGE - DARKER_BACKGROUND * 0x101

ONE = M_TR | M_BR
TWO = M_TM | M_TR | M_BM | M_BL | M_MM


def test_calibrated_eight(decoder, eights):
    decoder.calibrate_from_image(eights, "8")
    res = decoder.decode(eights)
    assert res.text == "8"
    assert res.invalid == 0
    assert res.ok
    assert res.scans[0].mask == M_ALL
    assert res.decodes[0].valid
    assert res.decodes[0].char == "8"
    assert not res.decodes[0].dp


def test_blank_digit_is_space(decoder, eights):
    decoder.calibrate_from_image(eights, "8")
    res = decoder.decode(draw(decoder, [0]))
    assert res.text == " "
    assert res.invalid == 0
    assert res.scans[0].mask == 0
    assert res.decodes[0].valid


def test_one(decoder, eights):
    decoder.calibrate_from_image(eights, "8")
    res = decoder.decode(draw(decoder, [ONE]))
    assert res.text == "1"
    assert res.invalid == 0


def test_decimal_point():
    dec = make_decoder(dp=(65, 95))
    img = draw(dec, [M_ALL], dps=[True])
    dec.calibrate_from_image(img, "8")
    res = dec.decode(img)
    assert res.text == "8."
    assert res.decodes[0].dp
    assert dec.decode(draw(dec, [M_ALL])).text == "8"


def test_two_digits():
    dec = make_decoder(digits=2)
    dec.calibrate_from_image(draw(dec, [M_ALL, M_ALL]), "88")
    res = dec.decode(draw(dec, [ONE, TWO]))
    assert res.text == "12"
    assert [d.char for d in res.decodes] == ["1", "2"]


def test_calibrate_from_partial_string():
    dec = make_decoder(digits=2)
    img = draw(dec, [ONE, TWO])
    dec.calibrate_from_image(img, "12")
    lev = dec.levels(dec.digits[0])
    # Segments of the '1' never seen on take the average 'on' level.
    assert lev.max_values() == [ON_LEVEL] * 7
    assert lev.min_values() == [OFF_LEVEL] * 7
    assert dec.decode(img).text == "12"


def test_invalid_digit(decoder, eights):
    decoder.calibrate_from_image(eights, "8")
    res = decoder.decode(draw(decoder, [M_TL]))
    assert res.invalid == 1
    assert not res.ok
    assert res.text == ""
    assert not res.decodes[0].valid
    assert res.scans[0].mask == M_TL


def test_seeded_levels():
    dec = LcdDecoder()
    dec.add_template("A", BBOX, WIDTH)
    dec.add_digit("A", 0, 0, (OFF_LEVEL, ON_LEVEL))
    lev = dec.levels(dec.digits[0])
    assert lev.threshold == OFF_LEVEL + (ON_LEVEL - OFF_LEVEL) // 2
    assert dec.decode(draw(dec, [M_ALL])).text == "8"
    assert dec.decode(draw(dec, [ONE])).text == "1"


def test_threshold_percent():
    dec = make_decoder(threshold_percent=25)
    dec.set_min_max(0, 1000, 2000)
    assert dec.levels(dec.digits[0]).segments[3].threshold == 1250


def test_calibrate_from_scan(decoder, eights):
    decoder.calibrate_from_image(eights, "8")
    res = decoder.decode(draw(decoder, [ONE]))
    decoder.calibrate_from_scan(res)
    lev = decoder.levels(decoder.digits[0])
    # TM was off in the scan, so its sample went into the min average.
    assert lev.segments[1].min.value == OFF_LEVEL
    assert lev.segments[2].max.value == ON_LEVEL
    assert decoder.decode(eights).text == "8"


def test_inverse():
    dec = make_decoder(inverse=True)
    img = draw(dec, [M_ALL])
    dec.calibrate_from_image(img, "8")
    # Bright segments are now 'on', so the dark drawing reads as blank.
    assert dec.decode(img).text == " "


def test_scan_is_raw(decoder, eights):
    scans = decoder.scan(eights)
    assert scans[0].segments == [ON_LEVEL] * 7
    assert scans[0].mask == 0


def test_construction_errors(decoder):
    with pytest.raises(ConfigError):
        decoder.add_template("A", BBOX, WIDTH)
    with pytest.raises(ConfigError):
        decoder.add_digit("B", 0, 0)
    with pytest.raises(ConfigError):
        decoder.add_digit("A", 0, 0, (1, 2, 3))
    with pytest.raises(ConfigError):
        LcdDecoder(threshold_percent=101)
    with pytest.raises(ConfigError):
        LcdDecoder(history=0)
    with pytest.raises(ConfigError):
        LcdDecoder(max_levels=10, saved_levels=20)


def test_calibration_errors(decoder, eights):
    with pytest.raises(ConfigError):
        decoder.calibrate_from_image(eights, "88")
    with pytest.raises(ConfigError):
        decoder.calibrate_from_image(eights, "X")
    other = make_decoder(digits=2)
    res = other.decode(draw(other, [M_ALL, M_ALL]))
    with pytest.raises(ConfigError):
        decoder.calibrate_from_scan(res)


def test_new_decoder_defaults():
    dec = new_decoder()
    assert dec.threshold == 50
    assert dec.history == 5
    assert dec.max_levels == 100
    assert dec.saved_levels == 50
    assert dec.on_margin == 2
    assert dec.off_margin == 5
    assert not dec.inverse


@pytest.mark.parametrize("tracking, expected", [
    (False, OFF_LEVEL),
    (True, (OFF_LEVEL + DARKER_OFF_LEVEL) // 2),
])
def test_off_baseline_tracking(tracking, expected):
    dec = make_decoder(off_baseline_tracking=tracking)
    dec.calibrate_from_image(draw(dec, [M_ALL]), "8")
    dec.calibrate_from_image(draw(dec, [M_ALL], background=DARKER_BACKGROUND), "8")
    assert dec.levels(dec.digits[0]).min_values() == [expected] * 7
