"""Pydantic models for conversion parameters and results."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


OutputFormat = Literal["stl", "3mf", "png"]


class Window(BaseModel):
    """Pixel window into a raster. A zero width or height runs to the edge."""
    model_config = ConfigDict(validate_assignment=True)

    x: int = Field(default=0, ge=0)
    y: int = Field(default=0, ge=0)
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)


class ConversionParams(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    input_path: str
    output_path: str = "out.stl"
    window: Window = Field(default_factory=Window)
    scale: float = Field(default=1.0, gt=0)
    zero: float = 10.0
    diff_path: Optional[str] = None
    visualize: bool = False


class ConversionResult(BaseModel):
    output_path: str
    output_format: OutputFormat
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    min_height: float
    max_height: float
    triangles: int = Field(default=0, ge=0)

    def summary(self) -> str:
        text = (
            f"{self.output_format.upper()} written to {self.output_path} "
            f"({self.width}x{self.height} samples, "
            f"heights {self.min_height:.3f} - {self.max_height:.3f}"
        )
        if self.triangles:
            text += f", {self.triangles} triangles"
        return text + ")"
