"""Tick-based timing constants.

Rendered sequences use **8 ticks per quarter note** as their time base, so one
4/4 bar is 32 ticks long. A tick is the smallest unit a melody can subdivide
to: halving a one-tick note is not allowed.

- `TICKS_PER_QUARTER = 8` - one quarter note (the resolution of the sequence)
- `QUARTERS_IN_A_BAR = 4` - one chord per quarter note, four per bar
- `BAR_LENGTH = 32` - one bar, and the duration of each axiom note
- `MIN_DURATION = 1` - the shortest note the melody grammar may produce
"""

TICKS_PER_QUARTER = 8
QUARTERS_IN_A_BAR = 4
BAR_LENGTH = TICKS_PER_QUARTER * QUARTERS_IN_A_BAR
MIN_DURATION = 1
