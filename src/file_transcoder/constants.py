"""Central constants for the file_transcoder project."""

# Separator between nested segments of a flattened path key, e.g.
# "user#address[0]#city".
PATH_SEPARATOR = "#"

# Field carrying the card number that gets tokenized on decode.
CARD_FIELD = "tarjeta"

# Field carrying the polygon geometry. Flattened GeoJSON collapses back
# into this column when written to XML or delimited text.
GEOMETRY_FIELD = "poligono"
COORDINATES_KEY = "coordinates"
GEOMETRY_PARENT = "geometry"

DEFAULT_CSV_DELIMITER = ","
DEFAULT_TXT_DELIMITER = ";"

XML_ROOT_ELEMENT = "root"
XML_ITEM_ELEMENT = "item"

TOKEN_ALGORITHM = "HS256"

# Outputs are packaged as plain UTF-8 (no BOM).
TEXT_ENCODING = "utf-8"

# Inputs may carry a BOM (files saved from Excel); 'utf-8-sig' reads both.
READ_ENCODING = "utf-8-sig"

# Key for element text when an XML element also has attributes. The
# xmltodict default ('#text') would clash with PATH_SEPARATOR.
XML_TEXT_KEY = "_text"
