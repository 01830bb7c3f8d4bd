"""
Tests for corpus files and the nerdle-gen command.
"""

from pathlib import Path

from nerdle_solver.corpus import KNOWN_COUNTS, PRESETS, load_equations, main, write_equations
from nerdle_solver.generate import generate


def test_write_then_load(tmp_path: Path, micro_corpus):
    path = tmp_path / "out.txt"
    count = write_equations(generate(5), str(path), show_progress=False)
    assert count == 127
    assert path.read_text(encoding="utf-8").splitlines() == micro_corpus
    assert load_equations(str(path)) == micro_corpus
    assert not (tmp_path / "out.txt.tmp").exists()


def test_writes_glyphs(tmp_path: Path):
    path = tmp_path / "ext.txt"
    write_equations(generate(5, extended=True), str(path), show_progress=False)
    text = path.read_text(encoding="utf-8")
    assert "4²=16" in text
    assert "s" not in text and "c" not in text


def test_load_normalizes_and_dedupes(tmp_path: Path):
    path = tmp_path / "in.txt"
    path.write_text("4s=16\n\n4²=16\n 2+2=4 \nnot an equation\n12+3=15\n", encoding="utf-8")
    assert load_equations(str(path)) == ["4²=16", "2+2=4"]


def test_presets_have_known_counts():
    assert set(PRESETS) == set(KNOWN_COUNTS)
    assert PRESETS["maxi"] == (10, True)
    assert KNOWN_COUNTS["classic"] == 17_723


def test_main_preset(tmp_path: Path, capsys):
    out = tmp_path / "micro.txt"
    assert main(["micro", "--output", str(out), "--no-progress", "--workers", "1"]) == 0
    assert len(out.read_text(encoding="utf-8").splitlines()) == 127
    assert "Wrote 127 equations" in capsys.readouterr().out


def test_main_slots(tmp_path: Path):
    out = tmp_path / "six.txt"
    assert main(["--slots", "6", "--extended", "--output", str(out), "--no-progress",
                 "--workers", "2"]) == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines and all(len(line) == 6 for line in lines)


def test_main_usage_errors(tmp_path: Path, capsys):
    assert main([]) == 2
    assert main(["--slots", "6"]) == 2
    assert main(["micro", "--slots", "5", "--output", str(tmp_path / "x.txt")]) == 2
    assert main(["--slots", "2", "--output", str(tmp_path / "x.txt")]) == 2
    assert "--output" in capsys.readouterr().err
