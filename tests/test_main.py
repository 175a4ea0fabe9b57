import functools
import pathlib

import mido
import pytest

import polyphony.__main__
import polyphony.playback


def _write_config (tmp_path: pathlib.Path, play: bool = False) -> pathlib.Path:

	config_path = tmp_path / "polyphony.yaml"
	config_path.write_text(
		"output:\n"
		f"  directory: {tmp_path / 'out'}\n"
		"sequence:\n"
		"  bpm: 100\n"
		"  seed: 5\n"
		"midi:\n"
		f"  play: {'true' if play else 'false'}\n"
	)

	return config_path


def test_load_config_missing_file (tmp_path: pathlib.Path) -> None:

	assert polyphony.__main__.load_config(str(tmp_path / "missing.yaml")) == {}


def test_load_config_reads_yaml (tmp_path: pathlib.Path) -> None:

	config = polyphony.__main__.load_config(str(_write_config(tmp_path)))

	assert config["sequence"] == {"bpm": 100, "seed": 5}
	assert config["midi"]["play"] is False


def test_load_config_empty_file (tmp_path: pathlib.Path) -> None:

	config_path = tmp_path / "empty.yaml"
	config_path.write_text("")

	assert polyphony.__main__.load_config(str(config_path)) == {}


def test_main_writes_midi_file (tmp_path: pathlib.Path) -> None:

	config_path = _write_config(tmp_path)

	status = polyphony.__main__.main(["ASHARP", "MINOR", "abaaaabc", "Test1", "--config", str(config_path)])

	filename = tmp_path / "out" / "Test1.mid"

	assert status == 0
	assert filename.exists()

	mid = mido.MidiFile(str(filename))
	assert mid.ticks_per_beat == 8
	assert len(mid.tracks) == 4
	assert mid.tracks[0][1].tempo == mido.bpm2tempo(100)


def test_main_seed_from_config_is_repeatable (tmp_path: pathlib.Path) -> None:

	config_path = _write_config(tmp_path)
	args = ["C", "MAJOR", "AAAA", "Test 2", "--config", str(config_path)]

	polyphony.__main__.main(args)
	first = (tmp_path / "out" / "Test 2.mid").read_bytes()

	polyphony.__main__.main(args)
	second = (tmp_path / "out" / "Test 2.mid").read_bytes()

	assert first == second


def test_main_command_line_overrides_config (tmp_path: pathlib.Path) -> None:

	config_path = _write_config(tmp_path)

	polyphony.__main__.main(["C", "major", "ab", "Fast", "--config", str(config_path), "--bpm", "150"])

	mid = mido.MidiFile(str(tmp_path / "out" / "Fast.mid"))
	assert mid.tracks[0][1].tempo == mido.bpm2tempo(150)


@pytest.mark.parametrize("tonic, scale, structure", [("H", "MAJOR", "ab"), ("C", "LYDIAN", "ab"), ("C", "MAJOR", "")])
def test_main_rejects_bad_arguments (tmp_path: pathlib.Path, tonic: str, scale: str, structure: str, monkeypatch: pytest.MonkeyPatch) -> None:

	# Without a config the output directory is the working directory.
	monkeypatch.chdir(tmp_path)

	with pytest.raises(SystemExit) as excinfo:
		polyphony.__main__.main([tonic, scale, structure, "Bad", "--config", str(tmp_path / "none.yaml")])

	assert excinfo.value.code == 2
	assert list(tmp_path.rglob("*.mid")) == []


def test_main_plays_then_closes (tmp_path: pathlib.Path, patch_midi: None, fake_output, monkeypatch: pytest.MonkeyPatch) -> None:

	play = polyphony.playback.play
	monkeypatch.setattr(polyphony.playback, "play", functools.partial(play, sleep=lambda seconds: None))
	config_path = _write_config(tmp_path, play=True)

	status = polyphony.__main__.main(["D", "major", "a", "Played", "--config", str(config_path)])

	midi_out = fake_output()

	assert status == 0
	assert midi_out.closed
	assert any(message.type == "note_on" for message in midi_out.sent)
	assert (tmp_path / "out" / "Played.mid").exists()


def test_main_no_play_flag_skips_device (tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:

	def _fail (*args, **kwargs):
		raise AssertionError("device should not be opened")

	monkeypatch.setattr("polyphony.playback.select_output_device", _fail)
	config_path = _write_config(tmp_path, play=True)

	assert polyphony.__main__.main(["E", "minor", "ab", "Quiet", "--config", str(config_path), "--no-play"]) == 0


def test_main_interrupted_playback_silences_and_saves (tmp_path: pathlib.Path, patch_midi: None, fake_output, monkeypatch: pytest.MonkeyPatch) -> None:

	"""Ctrl+C during playback stops the notes and still writes the file."""

	def _interrupt (*args, **kwargs):
		raise KeyboardInterrupt

	monkeypatch.setattr(polyphony.playback, "play", _interrupt)
	config_path = _write_config(tmp_path, play=True)

	assert polyphony.__main__.main(["G", "major", "ab", "Stopped", "--config", str(config_path)]) == 0

	midi_out = fake_output()

	assert midi_out.panicked
	assert midi_out.closed
	assert (tmp_path / "out" / "Stopped.mid").exists()
