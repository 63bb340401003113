# logitrack/schemas/waitlist.py
from pydantic import BaseModel, EmailStr


class WaitlistJoin(BaseModel):
    email: EmailStr
