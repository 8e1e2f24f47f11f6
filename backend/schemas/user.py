from pydantic import BaseModel, EmailStr, Field, ConfigDict

# Shared properties for user models
class UserBase(BaseModel):
    email: EmailStr

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str = Field(min_length=1)

# Schema for user registration requests
class UserCreate(UserBase):
    name: str = Field(min_length=1)
    password: str = Field(min_length=1)

# Public user identity
class UserResponse(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str

# Envelope for register/login: session token plus identity
class AuthResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    user: UserResponse

class MeResponse(BaseModel):
    success: bool = True
    user: UserResponse
