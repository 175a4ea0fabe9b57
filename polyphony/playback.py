"""Real-time playback of a sequence through a MIDI output port."""

import logging
import time
import typing

import mido

import polyphony.sequence


logger = logging.getLogger(__name__)


def _prompt_for_device (outputs: typing.List[str]) -> str:

	"""Ask on the console which of several output ports to use."""

	print("\nMIDI outputs:\n")
	for number, name in enumerate(outputs, 1):
		print(f"  {number}. {name}")
	print()

	while True:
		try:
			choice = int(input(f"Play through which output? (1-{len(outputs)}): "))
		except (ValueError, EOFError):
			choice = 0

		if 1 <= choice <= len(outputs):
			break

		print(f"Enter a number between 1 and {len(outputs)}.")

	selected = outputs[choice - 1]

	print(f"\nNext time, pass --device \"{selected}\" to skip this question.\n")

	return selected


def select_output_device (device_name: typing.Optional[str] = None) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:

	"""
	Open the MIDI output to play through.

	A named device is opened only if it exists. Without a name, a lone output
	is used directly and a choice between several is asked on the console.
	Failures are logged, not raised: playback is optional.

	Returns:
		The device name and open port, or ``(None, None)``.
	"""

	try:
		outputs = mido.get_output_names()

		if not outputs:
			logger.error("No MIDI outputs found")
			return None, None

		if device_name is None:
			device_name = outputs[0] if len(outputs) == 1 else _prompt_for_device(outputs)

		elif device_name not in outputs:
			logger.error(f"No MIDI output named {device_name!r} (found {outputs})")
			return None, None

		midi_out = mido.open_output(device_name)
		logger.info(f"Playing through {device_name!r}")

		return device_name, midi_out

	except Exception as e:
		logger.error(f"Could not open a MIDI output: {e}")
		return None, None


def play (
	sequence: polyphony.sequence.Sequence,
	midi_out: typing.Any,
	bpm: float = polyphony.sequence.DEFAULT_BPM,
	sleep: typing.Callable[[float], None] = time.sleep
) -> int:

	"""Send a sequence to an open MIDI output, waiting out the time between messages.

	Parameters:
		sequence: The sequence to play.
		midi_out: An open port (anything with a ``send(message)`` method).
		bpm: Playback tempo.
		sleep: Called with the wait in seconds before each message.

	Returns:
		The number of messages sent.
	"""

	mid = sequence.to_midi_file(bpm=bpm)

	logger.info(f"Playing {mid.length:.1f} seconds at {bpm} BPM. Press Ctrl+C to stop.")

	sent = 0

	# Iterating a MidiFile merges its tracks and converts delta times to seconds.
	for message in mid:

		if message.time > 0:
			sleep(message.time)

		if message.is_meta:
			continue

		midi_out.send(message)
		sent += 1

	logger.info("Playback finished")

	return sent
