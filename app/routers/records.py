import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app import crud, models, schemas
from app.core.maintenance_gate import MaintenanceGate
from app.database import get_db
from app.dependencies import allow_read, allow_write, get_maintenance_gate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/records", tags=["records"])


@router.post("/", response_model=schemas.PaymentRecord, status_code=201)
def create_record(
    record: schemas.PaymentRecordCreate,
    current_user: models.User = Depends(allow_write),
    db: Session = Depends(get_db)
):
    if crud.get_record_by_reference(db, record.reference):
        raise HTTPException(status_code=400, detail="Reference number already exists")

    db_record = crud.create_record(db, record, created_by=current_user.email)
    crud.create_audit_log(
        db,
        action="record.create",
        actor=current_user.email,
        details=f"Record {db_record.id} for invoice {db_record.invoice}"
    )
    return db_record


@router.get("/", response_model=schemas.PaymentRecordList)
def list_records(
    salesperson: str = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    current_user: models.User = Depends(allow_read),
    gate: MaintenanceGate = Depends(get_maintenance_gate),
    db: Session = Depends(get_db)
):
    """Recent records created by the caller; admins see everyone's"""
    created_by = None if gate.is_admin(current_user.email) else current_user.email
    items = crud.get_records(db, created_by=created_by, salesperson=salesperson, skip=skip, limit=limit)
    return {"items": items, "total": crud.count_records(db, created_by=created_by)}


@router.delete("/{record_id}")
def delete_record(
    record_id: int,
    current_user: models.User = Depends(allow_write),
    gate: MaintenanceGate = Depends(get_maintenance_gate),
    db: Session = Depends(get_db)
):
    record = crud.get_record(db, record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Record not found")

    if record.created_by != current_user.email and not gate.is_admin(current_user.email):
        raise HTTPException(status_code=403, detail="You do not have permission to delete this record")

    crud.delete_record(db, record, deleted_by=current_user.email)
    crud.create_audit_log(
        db,
        action="record.delete",
        actor=current_user.email,
        level="WARNING",
        details=f"Record {record_id} (reference {record.reference}) deleted"
    )
    logger.info(f"Record {record_id} deleted by {current_user.email}")
    return {"message": "Record deleted successfully"}
