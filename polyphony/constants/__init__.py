"""Constants for polyphony.

This package contains two sets of constants:

- ``polyphony.constants.pulses`` - Tick-based timing for rendered sequences
- ``polyphony.constants.velocity`` - MIDI velocity constants
"""
