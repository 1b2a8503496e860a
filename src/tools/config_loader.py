"""
Configuration loader for map profiles and environment variables.
"""

import os
from pathlib import Path
from typing import Dict, Any, Optional
import yaml

from src.rendering.policy import DEFAULT_CLUSTER_THRESHOLD, RenderPolicy
from src.spatial import ClusteringConfig


DEFAULT_PROFILE = "default"


class ConfigLoader:
    """Load and manage configuration from YAML files and environment."""

    CONFIG_DIR = Path(__file__).parent.parent.parent / "configs"

    @classmethod
    def load_profile(cls, profile_name: str = DEFAULT_PROFILE) -> Dict[str, Any]:
        """
        Load a map profile configuration.

        Args:
            profile_name: Name of the profile (default, dense-sweep)

        Returns:
            Dictionary with configuration values

        Raises:
            FileNotFoundError: If profile doesn't exist
        """
        profile_path = cls.CONFIG_DIR / f"{profile_name}.yaml"

        if not profile_path.exists():
            available = sorted(f.stem for f in cls.CONFIG_DIR.glob("*.yaml"))
            raise FileNotFoundError(
                f"Profile '{profile_name}' not found. Available profiles: {', '.join(available)}"
            )

        with open(profile_path, "r") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def get_profile_from_env(cls) -> Optional[str]:
        """Get profile name from RADAR_MAP_PROFILE environment variable."""
        return os.getenv("RADAR_MAP_PROFILE")

    @classmethod
    def load_default_or_env_profile(cls) -> Dict[str, Any]:
        """
        Load profile from environment variable or use the default profile.

        Returns:
            Configuration dictionary
        """
        profile = cls.get_profile_from_env() or DEFAULT_PROFILE
        return cls.load_profile(profile)


def get_config() -> Dict[str, Any]:
    """Convenience function to get current configuration."""
    return ConfigLoader.load_default_or_env_profile()


def clustering_config_from_profile(profile: Dict[str, Any]) -> ClusteringConfig:
    """Build a ClusteringConfig from the profile's ``grid`` and ``clustering`` sections."""
    grid_cfg = profile.get("grid", {}) or {}
    cluster_cfg = profile.get("clustering", {}) or {}
    defaults = ClusteringConfig()
    return ClusteringConfig(
        coarse_divisor=float(grid_cfg.get("coarse_divisor", defaults.coarse_divisor)),
        fine_divisor=float(grid_cfg.get("fine_divisor", defaults.fine_divisor)),
        detail_zoom=int(grid_cfg.get("detail_zoom", defaults.detail_zoom)),
        zoom_base=int(grid_cfg.get("zoom_base", defaults.zoom_base)),
        min_grid_size=float(grid_cfg.get("min_grid_size", defaults.min_grid_size)),
        detail_max_cell_size=int(
            cluster_cfg.get("detail_max_cell_size", defaults.detail_max_cell_size)
        ),
    )


def render_policy_from_profile(profile: Dict[str, Any]) -> RenderPolicy:
    """Build the RenderPolicy described by ``profile``."""
    cluster_cfg = profile.get("clustering", {}) or {}
    return RenderPolicy(
        cluster_threshold=int(cluster_cfg.get("threshold", DEFAULT_CLUSTER_THRESHOLD)),
        config=clustering_config_from_profile(profile),
    )
