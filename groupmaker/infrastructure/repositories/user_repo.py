import json
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from groupmaker.domain.errors import RosterError
from groupmaker.domain.models import UserDTO

_roster_adapter = TypeAdapter(List[UserDTO])


class UserRepo:
    """Read-only roster of users for one grouping round."""

    def __init__(self, users: Optional[List[UserDTO]] = None):
        self.users = list(users or [])

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "UserRepo":
        try:
            raw = Path(path).read_text(encoding="utf-8")
            return cls(_roster_adapter.validate_json(raw))
        except OSError as e:
            raise RosterError(f"Cannot read roster '{path}': {e}") from e
        except ValidationError as e:
            raise RosterError(f"Invalid roster '{path}': {e}") from e

    def to_json_file(self, path: Union[str, Path]):
        data = [u.model_dump(mode="json") for u in self.users]
        Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, user_id: str) -> Optional[UserDTO]:
        return next((u for u in self.users if u.id == user_id), None)

    def list_all(self) -> List[UserDTO]:
        return list(self.users)

    def unknown_references(self) -> Dict[str, List[str]]:
        """user id -> referenced ids that are not on the roster"""
        known = {u.id for u in self.users}
        result = {}
        for u in self.users:
            missing = [ref for ref in [*u.wanted, *u.unwanted] if ref not in known]
            if missing:
                result[u.id] = missing
        return result
