"""Pydantic models for the Radar Map server."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from src.rendering import ClusterDetail, MarkerStyle
from src.spatial import GeoPoint, RenderItem


class LatLng(BaseModel):
    """Simple latitude/longitude container."""

    lat: float = Field(..., description="Latitude in decimal degrees")
    lng: float = Field(..., description="Longitude in decimal degrees")


class BoundsModel(BaseModel):
    south: float
    west: float
    north: float
    east: float


class PointModel(BaseModel):
    """Wire form of a single radar reading."""

    id: str
    name: str
    lat: float
    lng: float
    category: Optional[str] = None
    reflectivity: Optional[float] = None
    rainfall_rate: Optional[float] = Field(default=None, alias="rainfallRate")
    altitude: Optional[float] = None
    description: Optional[str] = None

    model_config = {"populate_by_name": True}

    def to_point(self) -> GeoPoint:
        return GeoPoint(**self.model_dump())

    @classmethod
    def from_point(cls, point: GeoPoint) -> "PointModel":
        return cls(
            id=point.id,
            name=point.name,
            lat=point.lat,
            lng=point.lng,
            category=point.category,
            reflectivity=point.reflectivity,
            rainfall_rate=point.rainfall_rate,
            altitude=point.altitude,
            description=point.description,
        )


class MarkerStyleModel(BaseModel):
    fill_color: str = Field(..., alias="fillColor")
    radius: float
    color: str
    weight: int
    opacity: float
    fill_opacity: float = Field(..., alias="fillOpacity")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_style(cls, style: MarkerStyle) -> "MarkerStyleModel":
        return cls(
            fill_color=style.fill_color,
            radius=style.radius,
            color=style.color,
            weight=style.weight,
            opacity=style.opacity,
            fill_opacity=style.fill_opacity,
        )


class RenderItemModel(BaseModel):
    """A render item as sent to the map client."""

    id: str
    name: str
    lat: float
    lng: float
    category: Optional[str] = None
    description: Optional[str] = None
    reflectivity: Optional[float] = None
    rainfall_rate: Optional[float] = Field(default=None, alias="rainfallRate")
    altitude: Optional[float] = None
    is_cluster: bool = Field(False, alias="isCluster")
    cluster_size: Optional[int] = Field(default=None, alias="clusterSize")
    style: MarkerStyleModel

    model_config = {"populate_by_name": True}


class RenderMarkersRequest(BaseModel):
    """Either ``points`` or a radar ``document`` must be supplied."""

    points: Optional[List[PointModel]] = None
    document: Optional[Dict[str, Any]] = None
    zoom: int = Field(10, description="Current integer map zoom")
    search: Optional[str] = Field(default=None, description="Text filter on name/category")
    bounds: Optional[BoundsModel] = None

    @model_validator(mode="after")
    def _require_source(self) -> "RenderMarkersRequest":
        if self.points is None and self.document is None:
            raise ValueError("Provide either 'points' or 'document'")
        return self


class RenderStatusModel(BaseModel):
    rendered: int
    total: int
    zoom: int
    mode: str
    in_view: Optional[int] = Field(default=None, alias="inView")
    filename: Optional[str] = None

    model_config = {"populate_by_name": True}


class RenderMarkersResponse(BaseModel):
    items: List[RenderItemModel]
    clustered: bool
    grid_size: Optional[float] = Field(default=None, alias="gridSize")
    skipped_invalid: int = Field(0, alias="skippedInvalid")
    status: RenderStatusModel

    model_config = {"populate_by_name": True}


class ClusterMembersRequest(RenderMarkersRequest):
    cluster_id: str = Field(..., alias="clusterId")
    limit: int = Field(10, ge=1, le=100)

    model_config = {"populate_by_name": True}


class ClusterMembersResponse(BaseModel):
    cluster_id: str = Field(..., alias="clusterId")
    member_count: int = Field(..., alias="memberCount")
    members: List[PointModel]
    remaining: int

    model_config = {"populate_by_name": True}

    @classmethod
    def from_detail(cls, detail: ClusterDetail) -> "ClusterMembersResponse":
        return cls(
            cluster_id=detail.cluster_id,
            member_count=detail.member_count,
            members=[PointModel.from_point(p) for p in detail.members],
            remaining=detail.remaining,
        )


class LocateRequest(BaseModel):
    lat: str = Field(..., description="Latitude text as typed by the user")
    lng: str = Field(..., description="Longitude text as typed by the user")
    zoom: Optional[int] = Field(default=None, description="Current integer map zoom, if known")


class LocateResponse(BaseModel):
    target: LatLng
    zoom: int


def render_item_model(item: RenderItem, style: MarkerStyle) -> RenderItemModel:
    """Serialize a point or cluster together with its marker style."""
    return RenderItemModel(
        id=item.id,
        name=item.name,
        lat=item.lat,
        lng=item.lng,
        category=item.category,
        description=item.description,
        reflectivity=item.reflectivity,
        rainfall_rate=item.rainfall_rate,
        altitude=item.altitude,
        is_cluster=item.is_cluster,
        cluster_size=item.member_count if item.is_cluster else None,
        style=MarkerStyleModel.from_style(style),
    )
