"""Constants for the narrowing engine.

- Manual section search order
- Names that never get a choice list
"""

from ..core.ordering import PrecedenceOrder

# ---------------------------------------------------------------------------
# Section search order, taken from man(1)'s default. Entries are sorted by
# this table before a section is picked, so "1" wins over "8" and any
# section listed here wins over custom sections.
# ---------------------------------------------------------------------------
MAN_SECTION_ORDER = (
    "0 1 n l 8 3 2 5 4 9 6 7 "
    "1x 3x 4x 5x 6x 8x "
    "1bind 3bind 5bind 7bind 8bind "
    "1cn 8cn 1m 1mh 5mh 8mh "
    "1netpbm 3netpbm 5netpbm "
    "0p 1p 3p 3posix "
    "1pgsql 3pgsql 5pgsql "
    "3C++ 8C++ 3blt 3curses 3ncurses 3form 3menu 3db 3gdbm 3f 3gk 3paper "
    "3mm 5mm 3perl 3pm 3pq 3qt 3pub 3readline "
    "1ssl 3ssl 5ssl 7ssl "
    "3t 3tk 3tcl 3tclx 3tix 7l 7nr 8c Cg g s m"
)

DEFAULT_SECTION_ORDER = PrecedenceOrder.from_string(MAN_SECTION_ORDER)

# Requests for these names are usually stray browser or crawler requests;
# offering every variant as a choice would be noise.
NO_CHOICE_NAMES = frozenset({"index", "favicon"})
