import json
from typing import TypeAlias
from pydantic import BaseModel, Field

Snapshot: TypeAlias = dict[str, str]    # path -> blob id


class CommitInfo(BaseModel):
    message: str
    timestamp: int
    parent: str | None = None
    second_parent: str | None = None    # only set on merge commits
    files: dict[str, str] = Field(default_factory=dict)

    @property
    def is_merge(self) -> bool:
        return self.second_parent is not None

    def canonical_bytes(self) -> bytes:
        return json.dumps(self.model_dump(), sort_keys=True, separators=(",", ":")).encode()


class RefTable(BaseModel):
    head: str    # branch name, not a commit id
    branches: dict[str, str] = Field(default_factory=dict)
