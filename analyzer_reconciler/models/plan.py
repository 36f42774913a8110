"""Diff and plan records passed between the differ, planner and reconciler."""

from pydantic import BaseModel, ConfigDict, Field

from .analyzer import ArchiveRule, Tag
from .enums import OpAction


class TagDiff(BaseModel):
    """Tag changes. A changed value for an existing key is an add."""

    model_config = ConfigDict(frozen=True)

    to_remove: tuple[str, ...] = Field(default=(), description="Keys, ascending")
    to_add: tuple[Tag, ...] = Field(default=(), description="Tags, ascending by key")

    @property
    def is_empty(self) -> bool:
        return not self.to_remove and not self.to_add


class RuleDiff(BaseModel):
    """Archive rule changes, each bucket ascending by rule name."""

    model_config = ConfigDict(frozen=True)

    to_remove: tuple[str, ...] = ()
    to_add: tuple[ArchiveRule, ...] = ()
    to_update: tuple[ArchiveRule, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.to_remove and not self.to_add and not self.to_update


class RemoteOp(BaseModel):
    """One remote call of an update plan."""

    model_config = ConfigDict(frozen=True)

    action: OpAction
    tag_keys: tuple[str, ...] = ()
    tags: tuple[Tag, ...] = ()
    rule_name: str | None = None
    rule: ArchiveRule | None = None

    def describe(self) -> str:
        """Short human-readable form used in log lines."""
        if self.action == OpAction.UNTAG:
            return f"untag {list(self.tag_keys)}"
        if self.action == OpAction.TAG:
            return f"tag {[tag.key for tag in self.tags]}"
        return f"{self.action.value} {self.rule_name}"
