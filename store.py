import logging
import sqlite3
from typing import Any, Dict, List, Optional

from config import settings
from contact_message import ContactMessage
from database import get_db_connection, initialize_database
from user import User

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# SQLite INTEGER bounds; larger ids cannot be bound as parameters.
SQLITE_MIN_ID = -2 ** 63
SQLITE_MAX_ID = 2 ** 63 - 1


class UserStore:
    """Persists users in the ``users`` table.

    Records passed to ``insert``/``update`` are expected to have passed
    ``validators.validate_user`` already.
    """

    def __init__(self, db_file: Optional[str] = None) -> None:
        self.db_file = initialize_database(db_file)

    # ------------------------- Reads ------------------------- #
    def list_users(self) -> List[User]:
        conn = get_db_connection(self.db_file)
        try:
            rows = conn.execute(
                "SELECT id, full_name, email, phone, role FROM users ORDER BY id DESC"
            ).fetchall()
            return [User.from_dict(dict(row)) for row in rows]
        except sqlite3.Error as e:
            logger.error(f"Failed to fetch users: {e}")
            raise StoreError("Failed to fetch users") from e
        finally:
            conn.close()

    def find_user(self, user_id: int) -> Optional[User]:
        if not _fits_id(user_id):
            return None
        conn = get_db_connection(self.db_file)
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            return User.from_dict(dict(row)) if row else None
        except sqlite3.Error as e:
            logger.error(f"Failed to fetch user {user_id}: {e}")
            raise StoreError("Failed to fetch user") from e
        finally:
            conn.close()

    # ------------------------- Writes ------------------------- #
    def insert(self, record: Dict[str, Any]) -> User:
        user = User(
            full_name=record["full_name"],
            email=record["email"],
            phone=record["phone"],
            role=record["role"],
            password=record["password"],
        )
        conn = get_db_connection(self.db_file)
        try:
            cursor = conn.execute(
                "INSERT INTO users (full_name, email, phone, role, password) VALUES (?, ?, ?, ?, ?)",
                (user.full_name, user.email, user.phone, user.role, user.password),
            )
            conn.commit()
            user.id = cursor.lastrowid
            logger.info(f"User created: id={user.id}")
            return user
        except sqlite3.IntegrityError as e:
            if _is_unique_violation(e):
                logger.warning(f"Duplicate email on insert: {user.email}")
                raise DuplicateEmail() from e
            logger.error(f"Failed to add user: {e}")
            raise StoreError("Failed to add user") from e
        except sqlite3.Error as e:
            logger.error(f"Failed to add user: {e}")
            raise StoreError("Failed to add user") from e
        finally:
            conn.close()

    def update(self, user_id: int, record: Dict[str, Any]) -> None:
        """Overwrite a user's fields; the password only changes when a new one is given."""
        user = User(
            full_name=record["full_name"],
            email=record["email"],
            phone=record["phone"],
            role=record["role"],
            password=record.get("password"),
        )
        if not _fits_id(user_id):
            raise NotFound("User not found")
        if user.password:
            query = "UPDATE users SET full_name = ?, email = ?, phone = ?, role = ?, password = ? WHERE id = ?"
            params = (user.full_name, user.email, user.phone, user.role, user.password, user_id)
        else:
            query = "UPDATE users SET full_name = ?, email = ?, phone = ?, role = ? WHERE id = ?"
            params = (user.full_name, user.email, user.phone, user.role, user_id)

        conn = get_db_connection(self.db_file)
        try:
            cursor = conn.execute(query, params)
            conn.commit()
            affected = cursor.rowcount
        except sqlite3.IntegrityError as e:
            if _is_unique_violation(e):
                logger.warning(f"Duplicate email on update of user {user_id}: {user.email}")
                raise DuplicateEmail() from e
            logger.error(f"Failed to update user {user_id}: {e}")
            raise StoreError("Failed to update user") from e
        except sqlite3.Error as e:
            logger.error(f"Failed to update user {user_id}: {e}")
            raise StoreError("Failed to update user") from e
        finally:
            conn.close()

        # The WHERE clause doubles as the existence check.
        if affected == 0:
            raise NotFound("User not found")
        logger.info(f"User updated: id={user_id}")

    def delete(self, user_id: int) -> None:
        if not _fits_id(user_id):
            raise NotFound("User not found")
        conn = get_db_connection(self.db_file)
        try:
            cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            conn.commit()
            affected = cursor.rowcount
        except sqlite3.Error as e:
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise StoreError("Failed to delete user") from e
        finally:
            conn.close()
        if affected == 0:
            raise NotFound("User not found")
        logger.info(f"User deleted: id={user_id}")


class ContactMessageStore:
    """Persists contact form submissions in ``contact_messages``."""

    def __init__(self, db_file: Optional[str] = None) -> None:
        self.db_file = initialize_database(db_file)

    def list_messages(self) -> List[ContactMessage]:
        conn = get_db_connection(self.db_file)
        try:
            rows = conn.execute("SELECT * FROM contact_messages ORDER BY id DESC").fetchall()
            return [ContactMessage.from_dict(dict(row)) for row in rows]
        except sqlite3.Error as e:
            logger.error(f"Failed to fetch messages: {e}")
            raise StoreError("Failed to fetch messages") from e
        finally:
            conn.close()

    def insert(self, record: Dict[str, Any]) -> ContactMessage:
        msg = ContactMessage(
            name=record["name"],
            email=record["email"],
            subject=record["subject"],
            message=record["message"],
        )
        conn = get_db_connection(self.db_file)
        try:
            cursor = conn.execute(
                "INSERT INTO contact_messages (name, email, subject, message) VALUES (?, ?, ?, ?)",
                (msg.name, msg.email, msg.subject, msg.message),
            )
            conn.commit()
            row = conn.execute(
                "SELECT * FROM contact_messages WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()
            logger.info(f"Contact message saved: id={cursor.lastrowid}, subject={msg.subject}")
            return ContactMessage.from_dict(dict(row))
        except sqlite3.Error as e:
            logger.error(f"Failed to save message: {e}")
            raise StoreError("Failed to save message") from e
        finally:
            conn.close()

    def delete(self, message_id: int) -> None:
        if not _fits_id(message_id):
            raise NotFound("Message not found")
        conn = get_db_connection(self.db_file)
        try:
            cursor = conn.execute("DELETE FROM contact_messages WHERE id = ?", (message_id,))
            conn.commit()
            affected = cursor.rowcount
        except sqlite3.Error as e:
            logger.error(f"Failed to delete message {message_id}: {e}")
            raise StoreError("Failed to delete message") from e
        finally:
            conn.close()
        if affected == 0:
            raise NotFound("Message not found")
        logger.info(f"Contact message deleted: id={message_id}")


def _fits_id(value: int) -> bool:
    return SQLITE_MIN_ID <= value <= SQLITE_MAX_ID


def _is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    return "UNIQUE constraint failed" in str(exc)


class StoreError(Exception):
    """A persistence failure; the message is safe to show to clients."""


class DuplicateEmail(StoreError):
    def __init__(self, message: str = "Email already exists") -> None:
        super().__init__(message)


class NotFound(StoreError):
    pass


class ValidationError(Exception):
    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__(", ".join(self.errors))
