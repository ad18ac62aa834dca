from typing import Final, Tuple

# -- glyph emitted before each unordered (or list-less) `<li>` --
BULLET: Final[str] = "\u2022"
# -- one level of nested-list indentation; non-breaking so it survives whitespace collapsing --
LIST_INDENT: Final[str] = "\u00a0" * 4

# -- Unicode bidi control characters injected for `<bdi>` and `<bdo>` --
FIRST_STRONG_ISOLATE: Final[str] = "\u2068"
POP_DIRECTIONAL_ISOLATE: Final[str] = "\u2069"
LEFT_TO_RIGHT_OVERRIDE: Final[str] = "\u202d"
RIGHT_TO_LEFT_OVERRIDE: Final[str] = "\u202e"
POP_DIRECTIONAL_FORMATTING: Final[str] = "\u202c"

DEFAULT_FONT_SIZE: Final[float] = 14.0

# -- added to the font size to get the minimum line height --
LINE_HEIGHT_BUFFER_DEFAULT: Final[float] = 4.0

# -- ARGB, iOS system blue --
DEFAULT_LINK_COLOR: Final[int] = 0xFF007AFF
DEFAULT_LINK_COLOR_HEX: Final[str] = "#007AFF"

MAX_LIST_INDENT_LEVEL_DEFAULT: Final[int] = 100

# -- schemes a link may use; relative and fragment-only URLs are also allowed --
ALLOWED_URL_SCHEME_PREFIXES: Final[Tuple[str, ...]] = ("http://", "https://", "mailto:", "tel:")

# -- `fontWeight` values that mean bold --
BOLD_FONT_WEIGHTS: Final[Tuple[str, ...]] = ("bold", "700", "800", "900")
