"""Gymnasium environments for Falling Columns."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Standard 6x13 well
ENV_ID = "Columns-6x13-v0"

register(
    id=ENV_ID,
    entry_point="falling_columns.env.columns_env:ColumnsEnv",
)

__all__ = ["ENV_ID"]
