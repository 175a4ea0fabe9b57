
"""
polyphony - structured four-voice composition with stochastic L-systems.

Give it a key and a phrase structure and it writes a short polyphonic piece:

- **Structure.** A string such as ``"abab"`` names the phrases. Each distinct
  character becomes a phrase of 1-4 bars; repeated characters replay it.
- **Harmony.** A context-sensitive, weighted L-system grows a chord
  progression, one chord per quarter note, from a scale's consonance profile.
  Every piece ends on an authentic cadence.
- **Melody.** A random-branching L-system subdivides whole-bar notes into
  rhythms and steps through chord tones, independently for each of four
  voices and each phrase.
- **Output.** Notes land on one track per voice at 8 ticks per quarter note,
  ready to save as a standard MIDI file or play through a MIDI port.
- **Repeatable.** Pass ``seed=`` (or a ``random.Random``) and the same inputs
  give the same piece.

Minimal example:

    ```python
    import polyphony

    sequence = polyphony.compose("C", "major", "aba", seed=42)
    sequence.save("piece.mid")
    ```

Command line:

    python -m polyphony BFLAT MINOR abaaaabc Test1 --seed 7

Package-level exports: ``compose``, ``Notator``, ``Pitch``, ``Scale``, ``Sequence``.
"""

import polyphony.notator
import polyphony.pitches
import polyphony.scales
import polyphony.sequence


compose = polyphony.notator.compose
Notator = polyphony.notator.Notator
Pitch = polyphony.pitches.Pitch
Scale = polyphony.scales.Scale
Sequence = polyphony.sequence.Sequence
