"""Multi-track timed note sequences and standard MIDI file export."""

import dataclasses
import itertools
import logging
import typing

import mido

import polyphony.constants.pulses
import polyphony.constants.velocity


logger = logging.getLogger(__name__)

DEFAULT_BPM = 120
DEFAULT_CHANNEL = 0


@dataclasses.dataclass(frozen=True)
class Note:

	"""
	A note placed on a track, timed in ticks.
	"""

	start: int
	duration: int
	pitch: int
	velocity: int = polyphony.constants.velocity.DEFAULT_VELOCITY


	@property
	def end (self) -> int:

		return self.start + self.duration


@dataclasses.dataclass(order=True)
class NoteEvent:

	"""
	A note-on or note-off at a specific tick.

	Events order by tick, then note-offs before note-ons, then insertion order.
	"""

	tick: int
	priority: int
	serial: int
	message_type: str = dataclasses.field(compare=False)
	note: int = dataclasses.field(compare=False)
	velocity: int = dataclasses.field(compare=False)


class Track:

	"""
	One voice's notes.
	"""

	def __init__ (self, name: typing.Optional[str] = None) -> None:

		self.name = name
		self.notes: typing.List[Note] = []
		self._counter = itertools.count()
		self._events: typing.List[NoteEvent] = []


	def add_note (
		self,
		pitch: int,
		start: int,
		duration: int,
		velocity: int = polyphony.constants.velocity.DEFAULT_VELOCITY
	) -> None:

		"""
		Add a note-on at ``start`` and its matching note-off ``duration`` ticks later.
		"""

		if start < 0:
			raise ValueError("Start cannot be negative")

		if duration <= 0:
			raise ValueError("Duration must be positive")

		if pitch < 0 or pitch > 127:
			raise ValueError(f"Pitch out of MIDI range: {pitch}")

		if velocity < polyphony.constants.velocity.MIN_VELOCITY or velocity > polyphony.constants.velocity.MAX_VELOCITY:
			raise ValueError(f"Velocity out of MIDI range: {velocity}")

		note = Note(start=start, duration=duration, pitch=pitch, velocity=velocity)
		self.notes.append(note)

		self._events.append(NoteEvent(start, 1, next(self._counter), "note_on", pitch, velocity))
		self._events.append(NoteEvent(note.end, 0, next(self._counter), "note_off", pitch, velocity))


	def events (self) -> typing.List[NoteEvent]:

		"""Return all note-on and note-off events in playback order."""

		return sorted(self._events)


	def length_ticks (self) -> int:

		"""
		Return the tick at which the last note ends.
		"""

		return max((note.end for note in self.notes), default=0)


class Sequence:

	"""
	A set of independent tracks sharing one tick resolution.
	"""

	def __init__ (self, ticks_per_beat: int = polyphony.constants.pulses.TICKS_PER_QUARTER) -> None:

		if ticks_per_beat <= 0:
			raise ValueError("Ticks per beat must be positive")

		self.ticks_per_beat = ticks_per_beat
		self.tracks: typing.List[Track] = []


	def create_track (self, name: typing.Optional[str] = None) -> Track:

		"""
		Add an empty track and return it.
		"""

		track = Track(name)
		self.tracks.append(track)

		return track


	def length_ticks (self) -> int:

		"""
		Return the tick at which the last note of any track ends.
		"""

		return max((track.length_ticks() for track in self.tracks), default=0)


	def to_midi_file (self, bpm: float = DEFAULT_BPM, channel: int = DEFAULT_CHANNEL) -> mido.MidiFile:

		"""Build a type 1 MIDI file with one MIDI track per track.

		The tempo is written to the first track.
		"""

		if bpm <= 0:
			raise ValueError("BPM must be positive")

		mid = mido.MidiFile(type=1, ticks_per_beat=self.ticks_per_beat)

		for index, track in enumerate(self.tracks):

			midi_track = mido.MidiTrack()
			mid.tracks.append(midi_track)

			if track.name:
				midi_track.append(mido.MetaMessage('track_name', name=track.name, time=0))

			if index == 0:
				midi_track.append(mido.MetaMessage('set_tempo', tempo=mido.bpm2tempo(bpm), time=0))

			last_tick = 0

			for event in track.events():

				midi_track.append(mido.Message(
					event.message_type,
					channel = channel,
					note = event.note,
					velocity = event.velocity,
					time = event.tick - last_tick
				))

				last_tick = event.tick

		return mid


	def save (self, filename: str, bpm: float = DEFAULT_BPM) -> None:

		"""Write the sequence to a standard MIDI file."""

		mid = self.to_midi_file(bpm=bpm)

		logger.info(f"Saving {len(self.tracks)} tracks ({self.length_ticks()} ticks) to {filename}...")

		try:
			mid.save(filename)
		except OSError as e:
			logger.error(f"Failed to save MIDI file: {e}")
			raise

		logger.info(f"Saved {filename}")
