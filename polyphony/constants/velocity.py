"""MIDI velocity constants."""

MIN_VELOCITY = 0
MEDIUM_VELOCITY = 64
MAX_VELOCITY = 127

DEFAULT_VELOCITY = MEDIUM_VELOCITY
