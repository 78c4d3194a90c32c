# Segments, in bit order.
SEG_TL = 0  # Top left
SEG_TM = 1  # Top middle
SEG_TR = 2  # Top right
SEG_BR = 3  # Bottom right
SEG_BM = 4  # Bottom middle
SEG_BL = 5  # Bottom left
SEG_MM = 6  # Middle
SEGMENTS = 7

M_TL = 1 << SEG_TL
M_TM = 1 << SEG_TM
M_TR = 1 << SEG_TR
M_BR = 1 << SEG_BR
M_BM = 1 << SEG_BM
M_BL = 1 << SEG_BL
M_MM = 1 << SEG_MM
M_ALL = 0x7F

# Decoder options.
CONF_THRESHOLD = "threshold_percent"
CONF_HISTORY = "history"
CONF_MAX_LEVELS = "max_levels"
CONF_SAVED_LEVELS = "saved_levels"
CONF_ON_MARGIN = "on_margin"
CONF_OFF_MARGIN = "off_margin"
CONF_INVERSE = "inverse"
CONF_OFF_TRACKING = "off_baseline_tracking"

# Decoder description.
CONF_OPTIONS = "options"
CONF_OFFSET = "offset"
CONF_TEMPLATES = "templates"
CONF_DIGITS = "digits"
CONF_NAME = "name"
CONF_BBOX = "bbox"
CONF_WIDTH = "width"
CONF_DP = "dp"
CONF_TEMPLATE = "template"
CONF_X = "x"
CONF_Y = "y"
CONF_MIN = "min"
CONF_MAX = "max"

DEFAULT_THRESHOLD = 50  # percent
DEFAULT_HISTORY = 5
DEFAULT_MAX_LEVELS = 100
DEFAULT_SAVED_LEVELS = 50
DEFAULT_ON_MARGIN = 2
DEFAULT_OFF_MARGIN = 5
DEFAULT_INVERSE = False
DEFAULT_OFF_TRACKING = False

# Sampled values are 16 bit luminance, inverted for LCDs.
LEVEL_RANGE = 0x10000
