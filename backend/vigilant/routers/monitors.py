"""Monitor CRUD and check API endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies import get_engine, get_store
from ..schemas.monitor import (
    DeleteResponse,
    MonitorCreate,
    MonitorState,
    MonitorUpdate,
    SweepResult,
)
from ..services.engine import MonitorEngine
from ..services.store import MonitorNotFoundError, MonitorStore
from ..utils.clock import new_id

router = APIRouter(prefix="/api/monitors", tags=["monitors"])


@router.get("", response_model=List[MonitorState])
async def list_monitors(store: MonitorStore = Depends(get_store)):
    """List all monitors, seeding demo data into an empty store."""
    await store.ensure_seed()
    return await store.list()


@router.post("", response_model=MonitorState)
async def create_monitor(monitor: MonitorCreate, store: MonitorStore = Depends(get_store)):
    """Create a new monitor in PENDING state."""
    return await store.create(MonitorState(
        id=new_id(),
        name=monitor.name,
        url=monitor.url,
        interval=monitor.interval,
        status="PENDING",
        history=[],
    ))


@router.post("/sync", response_model=List[SweepResult])
async def sync_all(engine: MonitorEngine = Depends(get_engine)):
    """Run the global sweep now."""
    return await engine.sweep()


@router.get("/{monitor_id}", response_model=MonitorState)
async def get_monitor(monitor_id: str, store: MonitorStore = Depends(get_store)):
    """Get a specific monitor by ID."""
    try:
        return await store.get(monitor_id)
    except MonitorNotFoundError:
        raise HTTPException(status_code=404, detail="Monitor not found")


@router.put("/{monitor_id}", response_model=MonitorState)
async def update_monitor(
    monitor_id: str,
    update: MonitorUpdate,
    store: MonitorStore = Depends(get_store),
):
    """Update name, url or interval of a monitor."""
    changes = update.model_dump(exclude_none=True)
    try:
        return await store.mutate(monitor_id, lambda current: current.model_copy(update=changes))
    except MonitorNotFoundError:
        raise HTTPException(status_code=404, detail="Monitor not found")


@router.post("/{monitor_id}/check", response_model=MonitorState)
async def check_monitor(
    monitor_id: str,
    simulate_failure: bool = Query(default=False),
    engine: MonitorEngine = Depends(get_engine),
):
    """Run a manual check, optionally as a simulated outage drill."""
    try:
        return await engine.check_monitor(monitor_id, simulate_failure=simulate_failure)
    except MonitorNotFoundError:
        raise HTTPException(status_code=404, detail="Monitor not found")


@router.delete("/{monitor_id}", response_model=DeleteResponse)
async def delete_monitor(monitor_id: str, store: MonitorStore = Depends(get_store)):
    """Delete a monitor and its history."""
    deleted = await store.delete(monitor_id)
    return DeleteResponse(id=monitor_id, deleted=deleted)
