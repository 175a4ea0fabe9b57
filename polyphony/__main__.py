import argparse
import logging
import os
import sys
import typing

import yaml

import polyphony.notator
import polyphony.pitches
import polyphony.playback
import polyphony.scales
import polyphony.sequence


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = 'polyphony.yaml'


def load_config (config_path: str = DEFAULT_CONFIG_PATH) -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


def build_parser () -> argparse.ArgumentParser:

	"""
	Build the command-line parser.
	"""

	parser = argparse.ArgumentParser(
		prog = "polyphony",
		description = "Compose a four-voice piece from a key and a phrase structure, play it and save it as a MIDI file.",
		epilog = (
			"examples:\n"
			"  python -m polyphony ASHARP MINOR abaaaabc Test1\n"
			"  python -m polyphony C MAJOR AAAA \"Test 2\"\n"
			"  python -m polyphony Eb minor 4432 Test3 --seed 7 --no-play"
		),
		formatter_class = argparse.RawDescriptionHelpFormatter
	)

	parser.add_argument("tonic", help="tonic of the key, e.g. C, F#, Bb, ASHARP, BFLAT")
	parser.add_argument("scale", help="MAJOR or MINOR")
	parser.add_argument("structure", help="phrase structure, one character per phrase, e.g. ababcd")
	parser.add_argument("name", help="name of the piece, used for the MIDI file name")
	parser.add_argument("--seed", type=int, default=None, help="seed for repeatable output")
	parser.add_argument("--bpm", type=float, default=None, help="tempo for playback and the MIDI file")
	parser.add_argument("--device", default=None, help="MIDI output device name")
	parser.add_argument("--no-play", action="store_true", help="write the file without playing it")
	parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="YAML configuration file")
	parser.add_argument("--verbose", "-v", action="store_true", help="log rewriting detail")

	return parser


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the polyphony command.
	"""

	parser = build_parser()
	args = parser.parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	try:
		tonic = polyphony.pitches.parse_pitch(args.tonic)
		scale = polyphony.scales.parse_scale(args.scale)
		if not args.structure:
			raise ValueError("Structure string cannot be empty")
	except ValueError as e:
		parser.error(str(e))

	config = load_config(args.config)
	sequence_config = config.get('sequence', {}) or {}
	midi_config = config.get('midi', {}) or {}
	output_config = config.get('output', {}) or {}

	seed = args.seed if args.seed is not None else sequence_config.get('seed')
	bpm = args.bpm if args.bpm is not None else sequence_config.get('bpm', polyphony.sequence.DEFAULT_BPM)
	device_name = args.device if args.device is not None else midi_config.get('device_name')
	should_play = not args.no_play and midi_config.get('play', True)
	directory = output_config.get('directory', '.')

	logger.info(f"Composing {args.name!r}: {tonic.name_text()} {scale.name.lower()}, structure {args.structure!r}")

	sequence = polyphony.notator.compose(tonic, scale, args.structure, seed=seed)

	if should_play:

		_, midi_out = polyphony.playback.select_output_device(device_name)

		if midi_out is None:
			logger.warning("No MIDI output available - skipping playback.")

		else:
			try:
				polyphony.playback.play(sequence, midi_out, bpm=bpm)
			except KeyboardInterrupt:
				logger.info("Stopping...")
				midi_out.panic()
			finally:
				midi_out.close()

	os.makedirs(directory, exist_ok=True)
	sequence.save(os.path.join(directory, f"{args.name}.mid"), bpm=bpm)

	return 0


if __name__ == "__main__":
	sys.exit(main())
