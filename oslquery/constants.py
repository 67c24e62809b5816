"""
Constants for the OSO reader.

Keywords and file conventions of the OSO shader-object format.
"""

import numpy as np

# File conventions
OSO_EXTENSION = ".oso"
SEARCHPATH_SEPARATOR = ":"

# Directive keywords
VERSION_KEYWORD = "OpenShadingLanguage"
CODE_MARKER = "code"
COMMENT_PREFIX = "#"
HINT_PREFIX = "%"

# Oldest supported major version of the format
MIN_MAJOR_VERSION = 1

SHADER_KINDS = ("shader", "surface", "displacement", "volume")

# Hint tags handled by the reader, everything else is skipped
META_HINT = "%meta{"
STRUCTFIELDS_HINT = "%structfields{"
STRUCT_HINT = "%struct{"
SPACE_HINT = "%space{"
DEFAULT_HINT = "%default{"
INITEXPR_HINT = "%initexpr"

DEFAULT_CLOSURE_TYPE = "closure"

# Signed 32-bit range used for integer literals
INT32_MIN = int(np.iinfo(np.int32).min)
INT32_MAX = int(np.iinfo(np.int32).max)
