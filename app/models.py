from sqlalchemy import Boolean, Column, Integer, String, DateTime, Text, Numeric, Date
from datetime import datetime
from .database import Base

# ============= USER MODEL =============

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    #lower-cased, doubles as the identity checked against the admin roster
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

# ============= PAYMENT RECORD MODEL =============

class PaymentRecord(Base):
    __tablename__ = "payment_records"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    salesperson = Column(String, nullable=False, index=True)
    client_code = Column(String, nullable=False)
    client_name = Column(String, nullable=False)
    invoice = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    payment_method = Column(String, nullable=False)
    issuing_bank = Column(String, nullable=True)
    receiving_bank = Column(String, nullable=True)
    reference = Column(String, nullable=False, index=True)
    collection_type = Column(String, nullable=False)
    payment_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_by = Column(String, nullable=False, index=True)

    #soft delete => row stays as the deleted-records archive
    deleted_at = Column(DateTime, nullable=True)
    deleted_by = Column(String, nullable=True)

# ============= KEY-VALUE PROPERTIES =============

class ScriptProperty(Base):
    __tablename__ = "script_properties"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

# ============= AUDIT LOG =============

class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    actor = Column(String, nullable=True)  #nullable for system actions
    level = Column(String, nullable=False, default="INFO")
    action = Column(String, nullable=False, index=True)  #e.g. "maintenance.enable", "login.failed"
    details = Column(Text, nullable=True)
