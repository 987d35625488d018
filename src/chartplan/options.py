"""Option records per plot type, validated after the three-way merge."""

from __future__ import annotations

from typing import Annotated, Any, Callable, Dict, List, Literal, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from chartplan.errors import ConfigError

StyleOption = Union[Dict[str, Any], Callable[..., Any]]


class _Options(BaseModel):
    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)


class AxisOptions(_Options):
    visible: Optional[bool] = None
    type: Optional[str] = None
    tickCount: Optional[int] = Field(default=None, ge=0)
    tickInterval: Optional[float] = None
    min: Optional[Union[float, str]] = None
    max: Optional[Union[float, str]] = None
    nice: Optional[bool] = None


class LabelOptions(_Options):
    visible: Optional[bool] = None
    position: Optional[str] = None
    offset: Optional[float] = None
    style: Optional[Dict[str, Any]] = None
    formatter: Optional[Callable[..., Any]] = None


class ConversionTagOptions(_Options):
    visible: bool = False
    size: Optional[float] = None
    spacing: Optional[float] = None
    offset: Optional[float] = None


class PlotOptions(_Options):
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    padding: Union[
        Literal["auto"], float, Annotated[List[float], Field(min_length=1, max_length=4)]
    ] = "auto"
    animation: bool = True
    responsive: bool = False
    label: Optional[LabelOptions] = None
    events: Optional[Dict[str, Callable[..., Any]]] = None
    data: Optional[List[Dict[str, Any]]] = None


class CartesianOptions(PlotOptions):
    xField: str
    yField: str
    colorField: Optional[str] = None
    xAxis: Optional[AxisOptions] = None
    yAxis: Optional[AxisOptions] = None


class ColumnOptions(CartesianOptions):
    """Column chart: vertical bands, categories on x."""

    type: Optional[Literal["rect", "triangle", "round"]] = None
    columnSize: Optional[float] = Field(default=None, gt=0, le=1)
    maxWidth: Optional[float] = Field(default=None, ge=0)
    minWidth: Optional[float] = Field(default=None, ge=0)
    columnStyle: Optional[StyleOption] = None
    conversionTag: ConversionTagOptions = Field(default_factory=ConversionTagOptions)


class BarOptions(CartesianOptions):
    """Bar chart: horizontal bands, categories on y."""

    barSize: Optional[float] = Field(default=None, gt=0, le=1)
    maxWidth: Optional[float] = Field(default=None, ge=0)
    minWidth: Optional[float] = Field(default=None, ge=0)
    barStyle: Optional[StyleOption] = None
    conversionTag: ConversionTagOptions = Field(default_factory=ConversionTagOptions)


class ScatterOptions(CartesianOptions):
    pointSize: float = Field(default=4, gt=0)
    pointStyle: Optional[StyleOption] = None
    shape: str = "circle"
    colorFields: Optional[Union[str, List[str]]] = None


def _format_error(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
    return f"{location}: {error.get('msg', 'invalid value')}"


def validate_options(
    model: Type[BaseModel],
    options: Mapping[str, Any],
    *,
    plot_type: str,
) -> BaseModel:
    try:
        return model.model_validate(dict(options))
    except PydanticValidationError as exc:
        problems = [_format_error(error) for error in exc.errors()]
        raise ConfigError(
            f"Invalid {plot_type} options: " + "; ".join(problems),
            context={"plot_type": plot_type, "errors": problems},
        ) from exc


__all__ = [
    "AxisOptions",
    "LabelOptions",
    "ConversionTagOptions",
    "PlotOptions",
    "CartesianOptions",
    "ColumnOptions",
    "BarOptions",
    "ScatterOptions",
    "validate_options",
]
