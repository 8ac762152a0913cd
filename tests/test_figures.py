from menger_sponge_framework import generate, rasterize
from tools.figures import plot_scaling_laws, plot_voxel_slices, plot_voxels_3d
from tools.sponge import main


def test_voxel_slices(tmp_path):
    field = rasterize(generate(2), 27)
    path = plot_voxel_slices(field, tmp_path / "slices.png")
    assert path.exists()
    assert path.stat().st_size > 0


def test_voxels_3d(tmp_path):
    path = plot_voxels_3d(rasterize(generate(1), 9), tmp_path / "sub" / "voxels.png")
    assert path.exists()


def test_scaling_laws(tmp_path):
    path = plot_scaling_laws(4, tmp_path / "scaling.png", medium="foam")
    assert path.exists()


def test_cli_plot(tmp_path, capsys):
    assert main(["plot", "1", "--resolution", "9", "--max-order", "3", "--out", str(tmp_path)]) == 0
    assert (tmp_path / "sponge_slices_n1.png").exists()
    assert (tmp_path / "sponge_scaling.png").exists()
