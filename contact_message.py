from __future__ import annotations


class ContactMessage:
    """A message submitted through the contact form."""

    def __init__(self, name: str, email: str, subject: str, message: str,
                 id: int | None = None, created_at: str | None = None) -> None:
        self.id = id
        self.name = name.strip()
        self.email = email.strip().lower()
        self.subject = subject
        self.message = message.strip()
        self.created_at = created_at

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
            "created_at": self.created_at,
        }

    @staticmethod
    def from_dict(data: dict) -> "ContactMessage":
        created_at = data.get("created_at")
        if created_at is not None and not isinstance(created_at, str):
            created_at = str(created_at)
        return ContactMessage(
            id=data.get("id"),
            name=data["name"],
            email=data["email"],
            subject=data["subject"],
            message=data["message"],
            created_at=created_at,
        )
