# planning/api/v1/auth.py
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from planning.api.deps import get_db, get_current_user
from planning.core.security import ensure_password_policy, hash_password, verify_and_maybe_upgrade
from planning.core.tokens import create_access_token
from planning.crud.user import user_crud
from planning.models.user import User
from planning.schemas.token import LoginRequest, Token
from planning.schemas.user import ProfileUpdate, UserCreate, UserOut

logger = logging.getLogger(__name__)

router = APIRouter()

# ---------- helpers ----------
def normalize_email(email: str) -> str:
    return (email or "").strip().lower()

def _issue_token(user: User) -> Token:
    return Token(
        access_token=create_access_token(sub=user.id, role=user.role),
        user=UserOut.model_validate(user),
    )

def _authenticate(db: Session, email: str, password: str) -> User:
    user = user_crud.get_by_email(db, normalize_email(email))
    if not user:
        raise HTTPException(status_code=401, detail="Email ou mot de passe incorrect")
    ok, new_hash = verify_and_maybe_upgrade(password, user.hashed_password)
    if not ok:
        logger.info("Falha de login para %s", user.email)
        raise HTTPException(status_code=401, detail="Email ou mot de passe incorrect")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="Your account has been disabled")
    if new_hash:
        user.hashed_password = new_hash
        db.add(user); db.commit()
    return user

# ---------- endpoints ----------
@router.post("/register", response_model=Token, status_code=201)
def register(body: UserCreate, db: Session = Depends(get_db)):
    ensure_password_policy(body.password)
    if user_crud.get_by_email(db, body.email):
        raise HTTPException(status_code=409, detail="Cet email est déjà utilisé")
    # auto-cadastro entra sempre como artiste; papel é trocado por um administrador
    user = user_crud.create(db, body)
    logger.info("Usuário %s cadastrado", user.id)
    return _issue_token(user)

@router.post("/login", response_model=Token)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    return _issue_token(_authenticate(db, body.email, body.password))

@router.post("/token", response_model=Token)
def login_oauth2_form(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    if not form.username or not form.password:
        raise HTTPException(status_code=400, detail="Veuillez fournir un email et un mot de passe")
    return _issue_token(_authenticate(db, form.username, form.password))

@router.get("/me", response_model=UserOut)
def get_profile(user: User = Depends(get_current_user)):
    return user

@router.patch("/me", response_model=UserOut)
def update_profile(body: ProfileUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    data = body.model_dump(exclude_unset=True)
    if data.get("email"):
        email = normalize_email(data["email"])
        other = user_crud.get_by_email(db, email)
        if other and other.id != user.id:
            raise HTTPException(status_code=409, detail="Cet email est déjà utilisé")
        data["email"] = email
    if data.get("password"):
        ensure_password_policy(data["password"])
        data["hashed_password"] = hash_password(data.pop("password"))
    data.pop("password", None)
    return user_crud.update(db, user, data)
