"""3D preview scene built from a parsed model."""

from ifcquant.visualization.scene import Scene, ShapeFactory, build_scene

__all__ = ["Scene", "ShapeFactory", "build_scene"]
