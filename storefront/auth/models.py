from pydantic import BaseModel

class TokenData(BaseModel):
    user_id: str | None = None
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
