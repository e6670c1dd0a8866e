"""Tests for the command line entry point."""

import json

import pytest
from PIL import Image

from quattractor.cli import PROFILES, build_parser, main, resolve_config
from quattractor.core.config import SideFlipVariation
from quattractor.params import random_config

SMALL = ["-n", "2000", "--width", "64", "--height", "48"]


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.seed == 0
        assert args.profile == "medium"
        assert args.projection == "simple"
        assert args.normalization == "logarithmic"

    def test_profiles(self):
        assert set(PROFILES) == {"low", "medium", "high"}

    def test_rejects_unknown_variation(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--variation", "sideways"])


class TestResolveConfig:
    def test_seeded(self):
        args = build_parser().parse_args(["-s", "9"])
        assert resolve_config(args).to_dict() == random_config(9).to_dict()

    def test_flag_overrides(self):
        args = build_parser().parse_args(
            ["-s", "9", "--variation", "smallest", "--step", "0.1", "0.2", "0.3", "--rotation", "1", "0", "0", "0"]
        )
        cfg = resolve_config(args)
        assert cfg.side_flip_variation is SideFlipVariation.FLIP_SMALLEST
        assert cfg.to_dict()["global_rotation"] == [1.0, 0.0, 0.0, 0.0]
        assert cfg.step_vector[2] == pytest.approx(0.3)

    def test_config_file(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"seed": 4, "step_vector": [0.5, 0.0, 0.0]}))
        cfg = resolve_config(build_parser().parse_args(["--config", str(path)]))
        assert cfg.seed == 4
        assert cfg.to_dict()["step_vector"] == [0.5, 0.0, 0.0]


class TestMain:
    def test_renders_png(self, tmp_path, capsys):
        out = tmp_path / "a.png"
        assert main(SMALL + ["-s", "3", "-o", str(out)]) == 0
        assert out.exists()
        with Image.open(out) as img:
            assert img.size == (64, 48)

        stdout = capsys.readouterr().out
        assert "Side flips" in stdout
        assert str(out) in stdout

    def test_config_file(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"step_vector": [0.3, 0.2, 0.1], "side_flip_variation": "flip_all_except_largest"}))
        out = tmp_path / "b.png"
        assert main(SMALL + ["--config", str(path), "-o", str(out), "--no-glow", "--no-vignette"]) == 0
        assert out.exists()

    def test_zero_points(self, tmp_path):
        out = tmp_path / "empty.png"
        assert main(["-n", "0", "--width", "16", "--height", "16", "-o", str(out)]) == 0
        assert out.exists()

    def test_bad_config_key(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"wind": [1, 0, 0]}))
        assert main(SMALL + ["--config", str(path), "-o", str(tmp_path / "c.png")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert main(SMALL + ["--config", str(path), "-o", str(tmp_path / "d.png")]) == 1

    def test_missing_config_file(self, tmp_path):
        assert main(SMALL + ["--config", str(tmp_path / "nope.json")]) == 1

    def test_warns_on_far_start(self, tmp_path, capsys):
        out = tmp_path / "e.png"
        assert main(SMALL + ["--start", "2", "0", "0", "-o", str(out)]) == 0
        assert "outside the unit ball" in capsys.readouterr().err

    def test_negative_points(self):
        with pytest.raises(SystemExit):
            main(["-n", "-5"])

    @pytest.mark.parametrize("flag", ["--width", "--height"])
    def test_zero_size_rejected(self, tmp_path, capsys, flag):
        out = tmp_path / "f.png"
        assert main(["-n", "10", flag, "0", "-o", str(out)]) == 1
        assert "image size must be positive" in capsys.readouterr().err
        assert not out.exists()
