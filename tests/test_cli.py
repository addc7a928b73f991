"""Tests for the command-line tools."""

import json

from reversnake.cli import _build_parser, main


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_simulate_defaults(self):
        parser = _build_parser()
        args = parser.parse_args(["simulate", "frames.json"])
        assert args.command == "simulate"
        assert args.script == "frames.json"
        assert args.variant == "a"
        assert args.frame_ms == 16
        assert args.seed is None
        assert not args.json

    def test_benchmark_defaults(self):
        parser = _build_parser()
        args = parser.parse_args(["benchmark"])
        assert args.command == "benchmark"
        assert args.num_games == 10
        assert args.max_frames == 2000


class TestSimulate:
    def test_runs_script(self, tmp_path, capsys):
        script = tmp_path / "frames.json"
        script.write_text(json.dumps([{}, {}, {}]))
        assert main(["simulate", str(script), "--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("running")
        assert "snake length 10" in out

    def test_json_output(self, tmp_path, capsys):
        script = tmp_path / "frames.json"
        frames = [{"pressed": ["food_up"], "held": ["food_up"]}]
        script.write_text(json.dumps(frames))
        assert main(["simulate", str(script), "--json", "--seed", "1"]) == 0
        state = json.loads(capsys.readouterr().out)
        assert state["food"]["position"] == [24, 12]
        assert "grid" not in state

    def test_variant_b(self, tmp_path, capsys):
        script = tmp_path / "frames.json"
        script.write_text("[]")
        assert main(["simulate", str(script), "--variant", "b", "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["variant"] == "b"

    def test_invalid_key(self, tmp_path):
        script = tmp_path / "frames.json"
        script.write_text(json.dumps([{"pressed": ["jump"]}]))
        assert main(["simulate", str(script)]) == 2

    def test_missing_script(self, tmp_path):
        assert main(["simulate", str(tmp_path / "missing.json")]) == 2


class TestBenchmarkCommand:
    def test_prints_summary(self, capsys):
        assert main(["benchmark", "--num-games", "1", "--max-frames", "20"]) == 0
        assert "Benchmark:" in capsys.readouterr().out
