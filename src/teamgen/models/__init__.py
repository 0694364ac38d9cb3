"""Canonical roster models."""

from .player import STAT_FIELDS, Player, PlayerStats, parse_stats, require_name, round_half_up

__all__ = ["STAT_FIELDS", "Player", "PlayerStats", "parse_stats", "require_name", "round_half_up"]
