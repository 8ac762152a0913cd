import json
import logging
import numpy as np
from tools.logging_config import PACKAGE_LOGGER, setup_logging
from tools.sponge import main


def test_generate(capsys):
    assert main(["generate", "2"]) == 0
    out = capsys.readouterr().out
    assert "cells:       400" in out


def test_generate_json(tmp_path, capsys):
    path = tmp_path / "cells.json"
    assert main(["generate", "1", "--json", str(path)]) == 0
    records = json.loads(path.read_text())
    assert len(records) == 20
    assert set(records[0]) == {"position", "size"}


def test_generate_with_tier(capsys):
    assert main(["generate", "5", "--tier", "mobile-low"]) == 0
    out = capsys.readouterr().out
    assert "level approximated" in out
    assert "cells:       400" in out


def test_capacity_refusal(capsys):
    assert main(["generate", "4", "--max-cells", "100"]) == 1
    assert "Refused" in capsys.readouterr().out


def test_invalid_order(capsys):
    assert main(["generate", "-1"]) == 1
    assert "Error" in capsys.readouterr().out


def test_voxelize(tmp_path, capsys):
    path = tmp_path / "grid.npy"
    assert main(["voxelize", "1", "--resolution", "9", "--save", str(path)]) == 0
    out = capsys.readouterr().out
    assert "solid voxels:     540 / 729" in out
    assert "solid components: 1" in out
    assert np.load(path).shape == (9, 9, 9)


def test_formulas(capsys):
    assert main(["formulas", "2", "--medium", "water", "--f0", "440"]) == 0
    out = capsys.readouterr().out
    assert "cube_count" in out
    assert "400" in out
    assert "3960" in out


def test_check(capsys):
    assert main(["check", "2"]) == 0
    out = capsys.readouterr().out
    assert out.count("ok") == 3


def test_slice(capsys):
    assert main(["slice", "1", "--width", "9", "--height", "9"]) == 0
    assert "###   ###" in capsys.readouterr().out


def test_variants(capsys):
    assert main(["variants", "--iterations", "1"]) == 0
    out = capsys.readouterr().out
    assert "Sierpinski Carpet" in out
    assert "Center-Only Sponge" in out


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_log_file(tmp_path, capsys):
    log_path = tmp_path / "sponge.log"
    try:
        assert main(["-v", "--log-file", str(log_path), "generate", "1"]) == 0
        for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
            handler.flush()
        assert "generated 20 cells" in log_path.read_text()
    finally:
        setup_logging(level=logging.WARNING)


def test_formulas_large_order(capsys):
    assert main(["formulas", "700"]) == 0
    out = capsys.readouterr().out
    assert "n=700" in out
    assert "inf" in out
