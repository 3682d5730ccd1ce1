"""
Cercalia API constants.
"""

DEFAULT_BASE_URL = "https://lb.cercalia.com/services/v2/json"
SUGGEST_BASE_URL = "https://lb.cercalia.com/suggest/SuggestServlet"

DEFAULT_TIMEOUT = 30.0

# Vendor error code for "no candidates / no results found"
ERROR_CODE_NO_RESULTS = "30006"

# Coordinate systems
CS_GDD = "gdd"
CS_WGS84 = "4326"
SRS_EPSG_4326 = "EPSG:4326"

DEFAULT_COUNTRY_CODE = "ESP"

# How many characters of a raw response are written to debug logs
RESPONSE_LOG_LIMIT = 500
