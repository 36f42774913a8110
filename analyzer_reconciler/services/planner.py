"""Ordering of update operations."""

from ..models import OpAction, RemoteOp, RuleDiff, TagDiff


def plan(tag_diff: TagDiff, rule_diff: RuleDiff) -> list[RemoteOp]:
    """
    Turn tag and rule diffs into the remote calls of an update.

    Order is fixed: remove tags, add tags, remove rules, add rules, update
    rules. Tag changes are one batched call each; rule changes are one call
    per rule. Empty steps are skipped.

    Args:
        tag_diff: Output of diff_tags
        rule_diff: Output of diff_rules

    Returns:
        Remote operations in execution order
    """
    if tag_diff.is_empty and rule_diff.is_empty:
        return []

    ops: list[RemoteOp] = []

    if tag_diff.to_remove:
        ops.append(RemoteOp(action=OpAction.UNTAG, tag_keys=tag_diff.to_remove))
    if tag_diff.to_add:
        ops.append(RemoteOp(action=OpAction.TAG, tags=tag_diff.to_add))

    for rule_name in rule_diff.to_remove:
        ops.append(RemoteOp(action=OpAction.DELETE_RULE, rule_name=rule_name))
    for rule in rule_diff.to_add:
        ops.append(RemoteOp(action=OpAction.CREATE_RULE, rule_name=rule.rule_name, rule=rule))
    for rule in rule_diff.to_update:
        ops.append(RemoteOp(action=OpAction.UPDATE_RULE, rule_name=rule.rule_name, rule=rule))

    return ops
