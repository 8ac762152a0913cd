import math
import pytest
import numpy as np
from itertools import product
from menger_sponge_framework import (
    RULES,
    CenterOnlyRule,
    InvalidArgument,
    MengerRule,
    SubdivisionRule,
    generate,
    get_rule,
    keep_by_offsets,
    keep_by_ternary_digits,
)


def test_digit_and_offset_forms_agree():
    """
    The ray-marcher's "two or more digits equal 1" test and the generator's
    "|dx|+|dy|+|dz| <= 1 is removed" test must agree on all 27 positions.
    Digit 1 is the middle of the axis, i.e. offset 0.
    """
    disagreements = []
    for xi, yi, zi in product(range(3), repeat=3):
        a = keep_by_ternary_digits(xi, yi, zi)
        b = keep_by_offsets(xi - 1, yi - 1, zi - 1)
        if a != b:
            disagreements.append((xi, yi, zi))
    assert disagreements == []


def test_menger_rule_matches_both_forms():
    rule = MengerRule()
    for x, y, z in product(range(3), repeat=3):
        assert rule.keeps(x, y, z, 3) == keep_by_ternary_digits(x, y, z)
        assert rule.keeps(x, y, z, 3) == keep_by_offsets(x - 1, y - 1, z - 1)


def test_menger_removes_center_and_faces():
    mask = RULES["menger"].mask(3)
    removed = {tuple(int(v) for v in idx) for idx in np.argwhere(~mask)}
    assert removed == {
        (1, 1, 1),
        (0, 1, 1), (2, 1, 1),
        (1, 0, 1), (1, 2, 1),
        (1, 1, 0), (1, 1, 2),
    }


@pytest.mark.parametrize("rule,factor,kept", [
    ("menger", 3, 20),
    ("center-only", 3, 26),
    ("menger", 2, 8),
    ("center-only", 2, 8),
    ("menger", 4, 64),
    ("center-only", 4, 64),
    ("menger", 5, 112),
    ("center-only", 5, 124),
])
def test_kept_per_step(rule, factor, kept):
    """Even factors have no center index, so nothing is carved."""
    assert get_rule(rule).kept_per_step(factor) == kept
    assert get_rule(rule).removed_per_step(factor) == factor ** 3 - kept


def test_kept_offsets_are_centered():
    offsets = RULES["menger"].kept_offsets(3)
    assert offsets.shape == (20, 3)
    assert set(np.unique(offsets)) == {-1.0, 0.0, 1.0}
    assert np.all(np.abs(offsets).sum(axis=1) > 1)

    even = RULES["menger"].kept_offsets(4)
    assert set(np.unique(even)) == {-1.5, -0.5, 0.5, 1.5}


def test_mask_is_read_only():
    mask = RULES["menger"].mask(3)
    with pytest.raises(ValueError):
        mask[0, 0, 0] = False


def test_similarity_dimension():
    assert RULES["menger"].similarity_dimension(3) == pytest.approx(math.log(20) / math.log(3))
    assert RULES["center-only"].similarity_dimension(3) == pytest.approx(math.log(26) / math.log(3))
    assert RULES["menger"].similarity_dimension(2) == pytest.approx(3.0)


def test_get_rule():
    assert isinstance(get_rule("menger"), MengerRule)
    assert isinstance(get_rule("center-only"), CenterOnlyRule)
    custom = CenterOnlyRule()
    assert get_rule(custom) is custom
    with pytest.raises(InvalidArgument):
        get_rule("remove-everything")
    with pytest.raises(InvalidArgument):
        get_rule(None)


class CornersOnly(SubdivisionRule):
    @property
    def name(self):
        return "corners"

    def keeps(self, x, y, z, factor=3):
        ends = (0, factor - 1)
        return x in ends and y in ends and z in ends


def test_custom_rule_drives_generator():
    rule = CornersOnly()
    assert rule.kept_per_step(3) == 8
    cells = generate(2, rule=rule)
    assert len(cells) == 64
    # +-1/3 +- 1/9 on every axis
    np.testing.assert_allclose(np.unique(np.round(np.abs(cells.centers), 9)), [2 / 9, 4 / 9])
