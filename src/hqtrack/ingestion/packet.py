"""Decoding of ``*HQ`` text frames.

A ``V1`` position report looks like::

    *HQ,<device>,V1,<HHMMSS>,<A|V>,<lat>,<N|S>,<lon>,<E|W>,<knots>,<course>,<DDMMYY>,...,<battery>#

Everything between the date and the trailing battery field varies between
firmware revisions and is ignored. Frames with any other header, operation
or arity decode to :class:`~hqtrack.models.UnknownPacket`.
"""

from __future__ import annotations

from pydantic import ValidationError

from hqtrack._constants import (
    FIELD_SEPARATOR,
    HEADER,
    MIN_FIELDS,
    PROTOCOL_VERSION,
    TERMINATOR,
    V1_MIN_FIELDS,
    VALID_FIX,
)
from hqtrack.exceptions import HqDecodeError
from hqtrack.ingestion.normalize import (
    knots_to_kmh,
    parse_battery,
    parse_coordinate,
    parse_nullable_float,
    parse_nullable_int,
    parse_timestamp,
)
from hqtrack.models import Packet, Position, Reading, UnknownPacket

_TERMINATOR_TEXT = TERMINATOR.decode("ascii")


def _is_v1_report(parts: list[str]) -> bool:
    return len(parts) >= V1_MIN_FIELDS and parts[0] == HEADER and parts[2] == PROTOCOL_VERSION


def _decode_v1(parts: list[str], message: str) -> Reading:
    device_id, time, validity = parts[1], parts[3], parts[4]
    latitude, latitude_hemisphere = parts[5], parts[6]
    longitude, longitude_hemisphere = parts[7], parts[8]
    speed, heading, date = parts[9], parts[10], parts[11]
    battery = parts[-1]

    try:
        timestamp = parse_timestamp(date, time)
    except ValueError as exc:
        raise HqDecodeError(f"Invalid timestamp: {exc}", frame=message) from exc

    try:
        lat = parse_coordinate(latitude, latitude_hemisphere)
        lon = parse_coordinate(longitude, longitude_hemisphere)
    except ValueError as exc:
        raise HqDecodeError(f"Invalid coordinate: {exc}", frame=message) from exc

    try:
        speed_kmh = knots_to_kmh(parse_nullable_float(speed))
        course = parse_nullable_int(heading)
    except ValueError as exc:
        raise HqDecodeError(f"Invalid speed or heading: {exc}", frame=message) from exc

    try:
        return Reading(
            device_id=device_id,
            timestamp=timestamp,
            position=Position(latitude=lat, longitude=lon),
            speed=speed_kmh,
            heading=course,
            battery=parse_battery(battery),
            valid=validity == VALID_FIX,
        )
    except ValidationError as exc:
        raise HqDecodeError(f"Reading out of range: {exc.errors()[0]['msg']}", frame=message) from exc


def decode_packet(frame: str) -> Packet:
    """Decode one terminator-delimited frame.

    Parameters
    ----------
    frame : str
        Frame text including the trailing ``#``.

    Returns
    -------
    Reading or UnknownPacket
        ``UnknownPacket`` carries the trimmed text of any frame that is
        not a ``V1`` report; it is a normal outcome, not an error.

    Raises
    ------
    HqDecodeError
        Missing terminator, fewer than three fields, or an unparsable
        date, time, coordinate, speed or heading in a ``V1`` report.
    """
    if not frame.endswith(_TERMINATOR_TEXT):
        raise HqDecodeError(f"Message must end with {_TERMINATOR_TEXT!r}", frame=frame)

    message = frame.rstrip(_TERMINATOR_TEXT)
    parts = message.split(FIELD_SEPARATOR)
    if len(parts) < MIN_FIELDS:
        raise HqDecodeError(
            "Message must contain at least a header, terminal number and operation name",
            frame=frame,
        )

    if _is_v1_report(parts):
        return _decode_v1(parts, message)
    return UnknownPacket(text=message)
