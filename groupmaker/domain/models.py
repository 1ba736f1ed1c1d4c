# groupmaker/domain/models.py
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class Gender(str, Enum):
    male = "male"
    female = "female"


class UserDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    wanted: List[str] = Field(default_factory=list)
    unwanted: List[str] = Field(default_factory=list)
    gender: Gender


class GroupDTO(BaseModel):
    id: str
    members: List[str] = Field(default_factory=list)


class GroupingOptions(BaseModel):
    """
    Everything one grouping run needs.

    initial_groups fixes the universe of group slots for the run; every
    attempt starts from its own copy of them. data is read-only.
    """
    group_size: int
    desired_wanted_amount: int = 1
    initial_groups: List[GroupDTO]
    data: List[UserDTO]
    strict: bool = False

    _users: Dict[str, UserDTO] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        self._users = {u.id: u for u in self.data}

    def user(self, user_id: str) -> UserDTO:
        return self._users[user_id]

    def has_user(self, user_id: str) -> bool:
        return user_id in self._users

    @property
    def gender_cap(self) -> int:
        return self.group_size // 2


# every user in exactly one group once an attempt completes
Partition = List[GroupDTO]
