from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional, List
from . import models, schemas
from .core.hashing import Hasher

# ============= USER CRUD =============

def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()

def create_user(db: Session, user: schemas.UserCreate):
    db_user = models.User(
        email=str(user.email).strip().lower(),
        hashed_password=Hasher.get_password_hash(user.password),
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def authenticate_user(db: Session, email: str, password: str) -> Optional[models.User]:
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not Hasher.verify_password(password, user.hashed_password):
        return None
    return user

# ============= PAYMENT RECORD CRUD =============

def get_record(db: Session, record_id: int):
    return db.query(models.PaymentRecord).filter(
        models.PaymentRecord.id == record_id,
        models.PaymentRecord.deleted_at.is_(None)
    ).first()

def get_record_by_reference(db: Session, reference: str):
    return db.query(models.PaymentRecord).filter(
        models.PaymentRecord.reference == reference,
        models.PaymentRecord.deleted_at.is_(None)
    ).first()

def get_records(
    db: Session,
    created_by: str = None,
    salesperson: str = None,
    skip: int = 0,
    limit: int = 100
) -> List[models.PaymentRecord]:
    query = db.query(models.PaymentRecord).filter(models.PaymentRecord.deleted_at.is_(None))
    if created_by:
        query = query.filter(models.PaymentRecord.created_by == created_by)
    if salesperson:
        query = query.filter(models.PaymentRecord.salesperson == salesperson)
    return query.order_by(models.PaymentRecord.created_at.desc(), models.PaymentRecord.id.desc()).offset(skip).limit(limit).all()

def count_records(db: Session, created_by: str = None) -> int:
    query = db.query(models.PaymentRecord).filter(models.PaymentRecord.deleted_at.is_(None))
    if created_by:
        query = query.filter(models.PaymentRecord.created_by == created_by)
    return query.count()

def create_record(db: Session, record: schemas.PaymentRecordCreate, created_by: str):
    db_record = models.PaymentRecord(**record.model_dump(), created_by=created_by)
    db.add(db_record)
    db.commit()
    db.refresh(db_record)
    return db_record

def delete_record(db: Session, record: models.PaymentRecord, deleted_by: str):
    record.deleted_at = datetime.utcnow()
    record.deleted_by = deleted_by
    db.commit()
    return record

# ============= AUDIT LOG CRUD =============

def create_audit_log(
    db: Session,
    action: str,
    actor: str = None,
    level: str = "INFO",
    details: str = None
):
    audit_log = models.AuditLog(
        action=action,
        actor=actor,
        level=level,
        details=details
    )
    db.add(audit_log)
    db.commit()
    return audit_log

def get_audit_logs(
    db: Session,
    actor: str = None,
    action: str = None,
    skip: int = 0,
    limit: int = 100
):
    query = db.query(models.AuditLog)
    if actor:
        query = query.filter(models.AuditLog.actor == actor)
    if action:
        query = query.filter(models.AuditLog.action == action)
    return query.order_by(models.AuditLog.timestamp.desc(), models.AuditLog.id.desc()).offset(skip).limit(limit).all()
