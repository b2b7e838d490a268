from __future__ import annotations

from datetime import datetime

import pytest

from hqtrack.exceptions import HqDecodeError
from hqtrack.ingestion.packet import decode_packet
from hqtrack.models import Reading, UnknownPacket

SAMPLE = "*HQ,123,V1,120000,A,3754.0000,N,14529.0000,E,10,null,010124,,,,,99#"


def _report(**fields: str) -> str:
    values = {
        "device": "123",
        "time": "120000",
        "validity": "A",
        "lat": "3754.0000",
        "lat_h": "N",
        "lon": "14529.0000",
        "lon_h": "E",
        "speed": "10",
        "heading": "null",
        "date": "010124",
        "battery": "99",
    }
    values.update(fields)
    return (
        f"*HQ,{values['device']},V1,{values['time']},{values['validity']},"
        f"{values['lat']},{values['lat_h']},{values['lon']},{values['lon_h']},"
        f"{values['speed']},{values['heading']},{values['date']},,,,,{values['battery']}#"
    )


def test_sample_report_decodes() -> None:
    reading = decode_packet(SAMPLE)

    assert isinstance(reading, Reading)
    assert reading.device_id == "123"
    assert reading.timestamp == datetime(2024, 1, 1, 12, 0, 0)
    assert reading.valid is True
    assert reading.position.latitude == pytest.approx(37.9)
    assert reading.position.longitude == pytest.approx(145.483333, abs=1e-6)
    assert reading.speed == pytest.approx(18.52)
    assert reading.heading == 0
    assert reading.battery == 99


def test_southern_and_western_hemispheres_negate() -> None:
    reading = decode_packet(_report(lat_h="S", lon_h="W"))

    assert isinstance(reading, Reading)
    assert reading.position.latitude == pytest.approx(-37.9)
    assert reading.position.longitude == pytest.approx(-145.483333, abs=1e-6)


def test_fractional_minutes() -> None:
    reading = decode_packet(_report(lat="5130.3000", lon="00007.5000", lon_h="W"))

    assert isinstance(reading, Reading)
    assert reading.position.latitude == pytest.approx(51 + 30.3 / 60)
    assert reading.position.longitude == pytest.approx(-(7.5 / 60))


def test_invalid_fix_is_still_a_reading() -> None:
    reading = decode_packet(_report(validity="V"))

    assert isinstance(reading, Reading)
    assert reading.valid is False


def test_battery_over_100_is_absent() -> None:
    reading = decode_packet(_report(battery="150"))

    assert isinstance(reading, Reading)
    assert reading.battery is None


def test_garbage_battery_is_absent() -> None:
    reading = decode_packet(_report(battery="FFFFBBFF"))

    assert isinstance(reading, Reading)
    assert reading.battery is None


def test_null_speed_and_heading_default_to_zero() -> None:
    reading = decode_packet(_report(speed="null", heading="null"))

    assert isinstance(reading, Reading)
    assert reading.speed == 0.0
    assert reading.heading == 0


def test_numeric_heading() -> None:
    reading = decode_packet(_report(heading="275"))

    assert isinstance(reading, Reading)
    assert reading.heading == 275


def test_month_13_is_a_decode_error() -> None:
    with pytest.raises(HqDecodeError):
        decode_packet(_report(date="011324"))


def test_invalid_time_is_a_decode_error() -> None:
    with pytest.raises(HqDecodeError):
        decode_packet(_report(time="250000"))


def test_short_date_is_a_decode_error() -> None:
    with pytest.raises(HqDecodeError):
        decode_packet(_report(date="0101"))


def test_unparsable_coordinate_is_a_decode_error() -> None:
    with pytest.raises(HqDecodeError):
        decode_packet(_report(lat="37x4.0000"))


def test_unparsable_speed_is_a_decode_error() -> None:
    with pytest.raises(HqDecodeError):
        decode_packet(_report(speed="fast"))


def test_out_of_range_latitude_is_a_decode_error() -> None:
    with pytest.raises(HqDecodeError):
        decode_packet(_report(lat="9530.0000"))


def test_missing_terminator_is_a_decode_error() -> None:
    with pytest.raises(HqDecodeError):
        decode_packet(SAMPLE.rstrip("#"))


def test_too_few_fields_is_a_decode_error() -> None:
    with pytest.raises(HqDecodeError) as excinfo:
        decode_packet("*HQ,123#")

    assert excinfo.value.frame == "*HQ,123#"


def test_other_operation_is_unknown() -> None:
    packet = decode_packet("*HQ,123,XT,120000#")

    assert packet == UnknownPacket(text="*HQ,123,XT,120000")


def test_other_header_is_unknown() -> None:
    frame = SAMPLE.replace("*HQ", "*XX")

    packet = decode_packet(frame)

    assert isinstance(packet, UnknownPacket)
    assert packet.text == frame[:-1]


def test_short_v1_report_is_unknown() -> None:
    packet = decode_packet("*HQ,123,V1,120000,A,3754.0000,N#")

    assert isinstance(packet, UnknownPacket)


def test_minimal_v1_report_takes_battery_from_last_field() -> None:
    reading = decode_packet("*HQ,123,V1,120000,A,3754.0000,N,14529.0000,E,0,0,010124,42#")

    assert isinstance(reading, Reading)
    assert reading.battery == 42


def test_battery_with_digit_separator_is_absent() -> None:
    reading = decode_packet(_report(battery="1_00"))

    assert isinstance(reading, Reading)
    assert reading.battery is None


def test_heading_with_digit_separator_is_a_decode_error() -> None:
    with pytest.raises(HqDecodeError):
        decode_packet(_report(heading="1_0"))


def test_speed_with_digit_separator_is_a_decode_error() -> None:
    with pytest.raises(HqDecodeError):
        decode_packet(_report(speed="1_0"))


def test_heading_above_359_is_a_decode_error() -> None:
    with pytest.raises(HqDecodeError):
        decode_packet(_report(heading="720"))


def test_heading_359_is_accepted() -> None:
    reading = decode_packet(_report(heading="359"))

    assert isinstance(reading, Reading)
    assert reading.heading == 359
