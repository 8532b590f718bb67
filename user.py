from __future__ import annotations


class User:
    """Represents a single account of the library desk."""

    def __init__(self, full_name: str, email: str, phone: str, role: str,
                 password: str | None = None, id: int | None = None) -> None:
        self.id = id
        self.full_name = full_name.strip()
        self.email = email.strip().lower()
        self.phone = phone.strip()
        self.role = role
        # Kept in plain text; never part of to_dict().
        self.password = password

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.full_name} <{self.email}> ({self.role})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role,
        }

    @staticmethod
    def from_dict(data: dict) -> "User":
        return User(
            id=data.get("id"),
            full_name=data["full_name"],
            email=data["email"],
            phone=data["phone"],
            role=data["role"],
            password=data.get("password"),
        )
