"""Carry heuristics and their registry."""

from domain.carry.conditions import CarryCondition, CarryThresholds
from domain.carry.engine import CarryHeuristicEngine

__all__ = ["CarryCondition", "CarryHeuristicEngine", "CarryThresholds"]
