"""
Render budget - clamps the requested order to what a display can draw.

The generator computes exactly what it is asked for; interactive screens
decide how much they can afford. This module is that decision, kept outside
the pure core:

    settings = DisplaySettings(order=5, mobile=True, low_graphics=True)
    plan, cells = generate_for_display(settings)
    plan.effective      # 2
    plan.notice         # "Render capped for performance; level approximated."
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))
from menger_sponge_framework import (
    CellArray, GenerationRequest, InvalidArgument, _check_order, generate_from_request,
)

logger = logging.getLogger("menger_sponge_framework.render_budget")

# Highest order each device class renders as individual cubes.
DEVICE_TIERS = {
    'mobile-low': 2,
    'mobile-high': 3,
    'desktop-low': 3,
    'desktop-high': 4,
}

# Slider range offered to the user.
MAX_ORDER = 5

# Instanced-mesh scenes (physics playground) stay at or below this order.
MAX_INSTANCED_ORDER = 3

APPROXIMATION_NOTICE = "Render capped for performance; level approximated."


def tier_for(mobile: bool, low_graphics: bool) -> str:
    device = 'mobile' if mobile else 'desktop'
    quality = 'low' if low_graphics else 'high'
    return f"{device}-{quality}"


def needs_performance_notice(order: int, low_graphics: bool) -> bool:
    """Whether the order slider should warn before the user commits."""
    return (low_graphics and order > 3) or (not low_graphics and order > 4)


@dataclass
class RenderPlan:
    requested: int
    effective: int
    tier: str
    approximated: bool
    notice: Optional[str] = None


def clamp_order(order: int, tier: str, ceiling: Optional[int] = None) -> RenderPlan:
    """Cap order at the tier ceiling, or at ceiling if lower; the plan records any cut."""
    order = _check_order(order)
    if tier not in DEVICE_TIERS:
        raise InvalidArgument(f"Unknown tier '{tier}'. Use one of: {list(DEVICE_TIERS)}")
    cap = DEVICE_TIERS[tier]
    if ceiling is not None:
        cap = min(cap, _check_order(ceiling, "ceiling"))
    effective = min(order, cap)
    approximated = effective < order
    if approximated:
        logger.info("order %d capped to %d for %s", order, effective, tier)
    return RenderPlan(
        requested=order,
        effective=effective,
        tier=tier,
        approximated=approximated,
        notice=APPROXIMATION_NOTICE if approximated else None,
    )


@dataclass
class DisplaySettings:
    """What a screen knows when it asks for a sponge."""
    order: int = 1
    rule: str = "menger"
    subdivision: int = 3
    low_graphics: bool = True
    mobile: bool = False
    auto_rotate: bool = True
    animation_speed: float = 1.0
    instanced: bool = False

    @property
    def tier(self) -> str:
        return tier_for(self.mobile, self.low_graphics)

    def plan(self) -> RenderPlan:
        ceiling = MAX_INSTANCED_ORDER if self.instanced else None
        return clamp_order(self.order, self.tier, ceiling)

    def to_request(self, plan: Optional[RenderPlan] = None) -> GenerationRequest:
        plan = plan or self.plan()
        return GenerationRequest(
            order=plan.effective,
            subdivision=self.subdivision,
            rule=self.rule,
        )


def generate_for_display(settings: DisplaySettings) -> Tuple[RenderPlan, CellArray]:
    """Clamp, then generate. The caller shows plan.notice when set."""
    plan = settings.plan()
    return plan, generate_from_request(settings.to_request(plan))
