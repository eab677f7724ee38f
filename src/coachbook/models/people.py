"""Trainer and client models."""

from dataclasses import dataclass


@dataclass
class Trainer:
    """A trainer whose schedule holds availability slots."""

    id: str
    display_name: str
    email: str = ""
    active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "email": self.email,
            "active": self.active,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Trainer":
        return cls(
            id=data["id"],
            display_name=data.get("display_name") or "",
            email=data.get("email") or "",
            active=bool(data.get("active", True)),
        )


@dataclass
class Client:
    """A client of a trainer."""

    id: str
    first_name: str
    last_name: str = ""
    email_address: str = ""
    phone_number: str = ""
    photo_url: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "email_address": self.email_address,
            "phone_number": self.phone_number,
            "photo_url": self.photo_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Client":
        return cls(
            id=data["id"],
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            email_address=data.get("email_address") or "",
            phone_number=data.get("phone_number") or "",
            photo_url=data.get("photo_url"),
        )


@dataclass(frozen=True)
class SessionContext:
    """Identity of the signed-in user, passed to whatever needs it."""

    user_id: str
    trainer_id: str | None = None
    is_admin: bool = False
