# planning/schemas/token.py
from pydantic import BaseModel, EmailStr
from planning.schemas.user import UserOut

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
