"""FastAPI server exposing the radar clustering pipeline as map actions."""

from __future__ import annotations

from typing import Any, Dict, List

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .schemas.models import (
    ClusterMembersRequest,
    ClusterMembersResponse,
    LatLng,
    LocateRequest,
    LocateResponse,
    PointModel,
    RenderMarkersRequest,
    RenderMarkersResponse,
    RenderStatusModel,
    render_item_model,
)
from .tools.view import Bounds, MapViewSession, ViewSnapshot
from src.rendering import cluster_detail, marker_style
from src.spatial import GeoPoint
from src.tools import (
    SAMPLE_STATIONS,
    ConfigLoader,
    document_metadata,
    filter_by_text,
    parse_coordinates,
    points_from_radar_document,
    render_policy_from_profile,
)

load_dotenv()

app = FastAPI(title="Radar Map Server", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> Dict[str, str]:
    return {"status": "ok"}


def _load_profile() -> Dict[str, Any]:
    return ConfigLoader.load_default_or_env_profile()


def _view_settings(profile: Dict[str, Any]) -> Dict[str, Any]:
    view_cfg = profile.get("view", {}) or {}
    return {
        "debounce_s": view_cfg.get("search_debounce_ms", 300) / 1000.0,
        "locate_min_zoom": view_cfg.get("locate_min_zoom", 12),
    }


def _request_points(request: RenderMarkersRequest) -> List[GeoPoint]:
    if request.document is not None:
        try:
            return points_from_radar_document(request.document)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
    return [point.to_point() for point in request.points or []]


def _render(request: RenderMarkersRequest) -> ViewSnapshot:
    profile = _load_profile()
    settings = _view_settings(profile)

    points = _request_points(request)
    session = MapViewSession(
        policy=render_policy_from_profile(profile),
        zoom=request.zoom,
        debounce_s=settings["debounce_s"],
        locate_min_zoom=settings["locate_min_zoom"],
        all_points=points,
        filtered_points=filter_by_text(points, request.search),
        search_term=request.search or "",
        metadata=document_metadata(request.document) if request.document is not None else None,
    )
    if request.bounds is not None:
        session.bounds = Bounds(**request.bounds.model_dump())
    return session.render()


@app.post("/actions/render_markers")
async def render_markers_action(request: RenderMarkersRequest) -> Dict[str, Any]:
    snapshot = _render(request)
    result = snapshot.result

    response = RenderMarkersResponse(
        items=[render_item_model(item, marker_style(item)) for item in result.items],
        clustered=result.clustered,
        grid_size=result.grid_size,
        skipped_invalid=result.skipped_invalid,
        status=RenderStatusModel(**vars(snapshot.status)),
    )
    return response.model_dump(by_alias=True)


@app.post("/actions/cluster_members")
async def cluster_members_action(request: ClusterMembersRequest) -> Dict[str, Any]:
    snapshot = _render(request)

    cluster = next(
        (item for item in snapshot.items if item.is_cluster and item.id == request.cluster_id),
        None,
    )
    if cluster is None:
        raise HTTPException(status_code=404, detail=f"Cluster '{request.cluster_id}' not found.")

    detail = cluster_detail(cluster, limit=request.limit)
    return ClusterMembersResponse.from_detail(detail).model_dump(by_alias=True)


@app.post("/actions/locate")
async def locate_action(request: LocateRequest) -> Dict[str, Any]:
    settings = _view_settings(_load_profile())
    try:
        lat, lng = parse_coordinates(request.lat, request.lng)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    zoom = settings["locate_min_zoom"]
    if request.zoom is not None:
        zoom = max(request.zoom, zoom)
    response = LocateResponse(target=LatLng(lat=lat, lng=lng), zoom=zoom)
    return response.model_dump()


@app.get("/actions/sample_points")
async def sample_points_action() -> Dict[str, Any]:
    return {"points": [PointModel.from_point(p).model_dump(by_alias=True) for p in SAMPLE_STATIONS]}


__all__ = ["app"]
