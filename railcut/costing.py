# railcut/costing.py
# Bill-of-materials cost utilities:
# - material cost from the total rail length
# - joint hardware cost from the number of joints
#
# Notes:
# - Prices are per mm of rail. If your supplier prices per meter, use
#   PriceModel.from_per_meter(...) (price_per_meter / 1000).
# - The joiner length is informational only. The span is exactly the sum of
#   the chosen stock pieces, joiners never add to it.

from __future__ import annotations

from dataclasses import dataclass

from .types import CutConfig


@dataclass(frozen=True)
class PriceModel:
    # Price per mm of rail material
    cost_per_unit_length: float = 0.0

    # Price of one joint connector set
    cost_per_joint_set: float = 0.0

    # Physical joiner length (display only)
    joiner_length: float = 0.0

    @classmethod
    def from_config(cls, config: CutConfig) -> "PriceModel":
        return cls(
            cost_per_unit_length=float(config.cost_per_unit_length or 0.0),
            cost_per_joint_set=float(config.cost_per_joint_set or 0.0),
            joiner_length=float(config.joiner_length or 0.0),
        )

    @classmethod
    def from_per_meter(
        cls,
        price_per_meter: float,
        cost_per_joint_set: float = 0.0,
        joiner_length: float = 0.0,
    ) -> "PriceModel":
        return cls(
            cost_per_unit_length=float(price_per_meter) / 1000.0,
            cost_per_joint_set=float(cost_per_joint_set),
            joiner_length=float(joiner_length),
        )


@dataclass(frozen=True)
class BomCost:
    total_length_mm: int
    joiner_count: int
    joiner_length: float
    material_cost: float
    joint_set_cost: float
    total_actual_cost: float


def compute_bom(total_length_mm: int, joints: int, price: PriceModel) -> BomCost:
    material = total_length_mm * price.cost_per_unit_length
    joint_sets = joints * price.cost_per_joint_set
    return BomCost(
        total_length_mm=int(total_length_mm),
        joiner_count=int(joints),
        joiner_length=price.joiner_length,
        material_cost=material,
        joint_set_cost=joint_sets,
        total_actual_cost=material + joint_sets,
    )
