import logging
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from fastapi.security import OAuth2PasswordRequestForm

from .. import crud, models, schemas
from ..core.admin_roster import AgentRoster
from ..core.maintenance_gate import MaintenanceGate
from ..core.properties import PropertyStore
from ..core.security import create_access_token
from ..database import get_db
from ..dependencies import allow_read, get_maintenance_gate, limiter
from ..schemas import OperationKind

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"]
)


@router.post("/", response_model=schemas.User)
@limiter.limit("5/minute")
def create_user(
    request: Request,
    user: schemas.UserCreate,
    db: Session = Depends(get_db),
    gate: MaintenanceGate = Depends(get_maintenance_gate)
):
    gate.assert_operation_allowed(str(user.email), OperationKind.WRITE)

    if not AgentRoster(PropertyStore(db)).contains(str(user.email)):
        crud.create_audit_log(db, action="user.register.denied", actor=str(user.email), level="WARNING")
        logger.warning(f"Registration refused for {user.email}: not a sales agent")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized user. The email is not registered as a sales agent."
        )

    if crud.get_user_by_email(db, email=str(user.email)):
        raise HTTPException(status_code=400, detail="Email already registered")

    db_user = crud.create_user(db=db, user=user)
    crud.create_audit_log(db, action="user.register", actor=db_user.email)
    logger.info(f"Registered user {db_user.email}")
    return db_user


@router.post("/token", response_model=schemas.Token)
@limiter.limit("10/minute")
def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
    gate: MaintenanceGate = Depends(get_maintenance_gate)
):
    email = form_data.username.strip().lower()
    gate.assert_operation_allowed(email, OperationKind.LOGIN)

    user = crud.authenticate_user(db, email, form_data.password)
    if not user:
        crud.create_audit_log(db, action="login.failed", actor=email, level="WARNING", details="Invalid credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        crud.create_audit_log(db, action="login.failed", actor=email, level="WARNING", details="Inactive account")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is not active. Contact an administrator.")

    access_token, _, expires_at = create_access_token(data={"sub": user.email})
    crud.create_audit_log(db, action="login.success", actor=user.email)
    return {"access_token": access_token, "token_type": "bearer", "expires_at": expires_at}


@router.get("/me", response_model=schemas.UserDetail)
def read_user_me(
    current_user: models.User = Depends(allow_read),
    gate: MaintenanceGate = Depends(get_maintenance_gate)
):
    return schemas.UserDetail(
        id=current_user.id,
        email=current_user.email,
        is_active=current_user.is_active,
        created_at=current_user.created_at,
        is_admin=gate.is_admin(current_user.email)
    )
