# backend/routes/users.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from services.accounts import CredentialVerifier, PasswordVerifier, register_user
from utils.tokenJWT import token_for, get_current_user
from utils.audit import write_log, client_ip
from utils.errors import AuthError, DuplicateEntry
from models.users import User
from schemas import user as schemas

router = APIRouter(prefix="/users", tags=["Users"])

# Credential check used by /login; override this dependency to plug in another verifier
def get_verifier(db: Session = Depends(get_db)) -> CredentialVerifier:
    return PasswordVerifier(db)

def _auth_response(user: User, message: str) -> dict:
    return {"success": True, "message": message, "token": token_for(user), "user": user}

# Register a new customer and sign them in
@router.post("/register", response_model=schemas.AuthResponse)
def register(payload: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    try:
        user = register_user(db, payload.name, payload.email, payload.password)
    except DuplicateEntry:
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": payload.email, "reason": "Email exists"})
        raise

    write_log(db, user_id=user.id, action="REGISTER", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": user.email})
    return _auth_response(user, "Registered successfully")


# Verify credentials and issue a session token
@router.post("/login", response_model=schemas.AuthResponse)
def login(
    payload: schemas.UserLogin,
    request: Request,
    db: Session = Depends(get_db),
    verifier: CredentialVerifier = Depends(get_verifier),
):
    try:
        user = verifier.verify(payload.email, payload.password)
    except AuthError:
        write_log(db, user_id=None, action="LOGIN", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": payload.email})
        raise

    write_log(db, user_id=user.id, action="LOGIN", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": user.email})
    return _auth_response(user, "Login successful")


# Identity behind the bearer token
@router.get("/me", response_model=schemas.MeResponse)
def me(current_user: User = Depends(get_current_user)):
    return {"success": True, "user": current_user}
