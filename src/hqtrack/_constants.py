"""Internal constants shared across the library."""

# ------------------------------------------------------------------
# Wire protocol
# ------------------------------------------------------------------

TERMINATOR = b"#"
HEADER = "*HQ"
PROTOCOL_VERSION = "V1"
FIELD_SEPARATOR = ","
NULL_TOKEN = "null"
VALID_FIX = "A"
NEGATIVE_HEMISPHERES: frozenset[str] = frozenset({"S", "W"})

#: Header, device id and operation name are always present.
MIN_FIELDS = 3
#: Fixed-position fields of a V1 report plus the trailing battery field.
V1_MIN_FIELDS = 13

KNOTS_TO_KMH = 1.852
MAX_BATTERY = 100
CENTURY = 2000

# ------------------------------------------------------------------
# Server defaults
# ------------------------------------------------------------------

DEFAULT_HOST = "0.0.0.0"
#: Seconds a connection may stay silent before it is torn down.
DEFAULT_IDLE_TIMEOUT = 240.0
DEFAULT_POOL_SIZE = 10
MEMORY_URL = "memory://"
