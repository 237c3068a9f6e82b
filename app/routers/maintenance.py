from fastapi import APIRouter, Depends, Body
from typing import Optional

from app import models, schemas
from app.core.security import get_current_active_user
from app.core.maintenance_gate import MaintenanceGate
from app.dependencies import get_maintenance_gate

router = APIRouter(tags=["maintenance"])


@router.get("/maintenance/status", response_model=schemas.MaintenanceConfig, response_model_by_alias=True)
def get_maintenance_status(gate: MaintenanceGate = Depends(get_maintenance_gate)):
    """Get current maintenance mode status (public endpoint)"""
    return gate.get_status()


@router.post("/admin/maintenance/enable", response_model=schemas.MaintenanceConfig, response_model_by_alias=True)
def enable_maintenance(
    payload: Optional[schemas.MaintenanceUpdate] = Body(None),
    current_user: models.User = Depends(get_current_active_user),
    gate: MaintenanceGate = Depends(get_maintenance_gate)
):
    """Enable maintenance mode (admin only)

    Example body: {"mode": "full", "message": "Back at 14:00", "allowAdmins": true,
    "until": "2024-01-15T14:00:00Z"}
    """
    partial = payload.to_partial() if payload else {}
    return gate.enable(partial, current_user.email)


@router.post("/admin/maintenance/disable", response_model=schemas.MaintenanceConfig, response_model_by_alias=True)
def disable_maintenance(
    current_user: models.User = Depends(get_current_active_user),
    gate: MaintenanceGate = Depends(get_maintenance_gate)
):
    """Disable maintenance mode (admin only)"""
    return gate.disable(current_user.email)


@router.patch("/admin/maintenance", response_model=schemas.MaintenanceConfig, response_model_by_alias=True)
def update_maintenance(
    payload: schemas.MaintenanceUpdate,
    current_user: models.User = Depends(get_current_active_user),
    gate: MaintenanceGate = Depends(get_maintenance_gate)
):
    """Change individual maintenance settings without toggling (admin only)"""
    return gate.update_status(payload.to_partial(), current_user.email)
