"""Pydantic return models for core computation functions."""

import numpy as np
from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class Solid(BaseModel):
    """Triangle soup with one normal per triangle.

    ``triangles`` has shape (N, 3, 3): triangle, corner, xyz.
    ``normals`` has shape (N, 3).
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    triangles: np.ndarray
    normals: np.ndarray
    name: str = "heightfield"

    @field_validator("triangles")
    @classmethod
    def triangles_must_be_n_by_3_by_3(cls, v: np.ndarray) -> np.ndarray:
        v = np.asarray(v, dtype=np.float32)
        if v.ndim != 3 or v.shape[1:] != (3, 3):
            raise ValueError(f"triangles must have shape (N, 3, 3), got {v.shape}")
        return v

    @field_validator("normals")
    @classmethod
    def normals_must_be_n_by_3(cls, v: np.ndarray) -> np.ndarray:
        v = np.asarray(v, dtype=np.float32)
        if v.ndim != 2 or v.shape[1] != 3:
            raise ValueError(f"normals must have shape (N, 3), got {v.shape}")
        return v

    @model_validator(mode="after")
    def one_normal_per_triangle(self) -> "Solid":
        if len(self.normals) != len(self.triangles):
            raise ValueError(
                f"{len(self.triangles)} triangles but {len(self.normals)} normals"
            )
        return self

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    def bounds(self) -> tuple[np.ndarray, np.ndarray]:
        """Return the (min, max) corners of the axis-aligned bounding box."""
        pts = self.triangles.reshape(-1, 3)
        return pts.min(axis=0), pts.max(axis=0)

    def indexed(self) -> tuple[np.ndarray, np.ndarray]:
        """Return shared vertices (V, 3) and faces (N, 3) indexing into them."""
        pts = self.triangles.reshape(-1, 3)
        vertices, inverse = np.unique(pts, axis=0, return_inverse=True)
        faces = inverse.reshape(-1, 3)
        return vertices, faces
