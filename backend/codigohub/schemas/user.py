"""
CodigoHub Backend — User Schemas
=================================

The password hash never leaves the service layer: UserResponse has no
`contrasena` field.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr


class UserRegister(BaseModel):
    nombre_completo: Optional[str] = None
    email: Optional[EmailStr] = None
    contrasena: Optional[str] = None


class UserLogin(BaseModel):
    email: EmailStr
    contrasena: str


class UserUpdate(BaseModel):
    nombre_completo: Optional[str] = None
    email: Optional[EmailStr] = None
    contrasena: Optional[str] = None
    rol: Optional[str] = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_usuario: int
    nombre_completo: str
    email: str
    rol: str
    fecha_creacion: datetime


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    usuario: UserResponse


# ── Envelopes ─────────────────────────────────────────────────────────────


class UserResult(BaseModel):
    success: bool = True
    message: str
    usuario: UserResponse


class UserListResult(BaseModel):
    success: bool = True
    message: str
    usuarios: List[UserResponse]


class LoginResult(LoginResponse):
    success: bool = True
    message: str = "Login successful"
