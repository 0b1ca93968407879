from hbplace.cli import main
from hbplace.rng import set_current_seed


def test_wrong_argument_count_prints_usage(capsys):
    assert main(["only-one.txt"]) == -1
    assert "usage" in capsys.readouterr().out


def test_no_arguments_prints_usage(capsys):
    assert main([]) == -1
    assert "usage" in capsys.readouterr().out


def test_missing_input_reports_error(tmp_path, capsys):
    status = main([str(tmp_path / "absent.txt"), str(tmp_path / "out.txt")])
    assert status == 1
    assert "error" in capsys.readouterr().err
    assert not (tmp_path / "out.txt").exists()


def test_full_run_writes_layout(tmp_path):
    set_current_seed(42)
    in_path = tmp_path / "in.txt"
    in_path.write_text("NumHardBlocks 2\nHardBlock X 1 1\nHardBlock Y 1 1\n", encoding="utf-8")
    out_path = tmp_path / "out.txt"
    assert main([str(in_path), str(out_path)]) == 0
    lines = out_path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("Area ")
    assert int(lines[0].split()[1]) >= 2
    assert lines[2] == "NumHardBlocks 2"
    names = {line.split()[0] for line in lines[3:5]}
    assert names == {"X", "Y"}
    positions = {tuple(line.split()[1:3]) for line in lines[3:5]}
    assert len(positions) == 2