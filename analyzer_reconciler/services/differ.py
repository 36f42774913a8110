# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Diffing of analyzer tags and archive rules.

Absent collections are treated as empty. Every output bucket is sorted by
key or rule name so the same inputs always yield the same remote calls.
"""

from collections.abc import Iterable

from ..models import ArchiveRule, RuleDiff, Tag, TagDiff


def diff_tags(old: Iterable[Tag] | None, new: Iterable[Tag] | None) -> TagDiff:
    """
    Compute tag changes between two tag sets.

    Keys present in ``old`` but not in ``new`` are removed. Tags in ``new``
    without an identical key and value in ``old`` are added; tagging
    overwrites by key, so a changed value is an add rather than an update.

    Args:
        old: Previously observed tags
        new: Desired tags

    Returns:
        TagDiff with keys to remove and tags to add
    """
    old_tags = list(old or ())
    new_tags = list(new or ())

    new_keys = {tag.key for tag in new_tags}
    to_remove = sorted({tag.key for tag in old_tags} - new_keys)
    to_add = sorted((tag for tag in new_tags if tag not in old_tags), key=lambda tag: tag.key)

    return TagDiff(to_remove=tuple(to_remove), to_add=tuple(to_add))


def diff_rules(
    old: Iterable[ArchiveRule] | None, new: Iterable[ArchiveRule] | None
) -> RuleDiff:
    """
    Compute archive rule changes between two rule sequences.

    Names present only in ``old`` are removed. A rule in ``new`` without an
    identical counterpart in ``old`` is an update when its name exists in
    ``old`` (its filters changed) and an add otherwise.

    Args:
        old: Previously observed rules
        new: Desired rules

    Returns:
        RuleDiff with rule names to remove, rules to add and rules to update
    """
    old_rules = list(old or ())
    new_rules = list(new or ())

    old_names = {rule.rule_name for rule in old_rules}
    new_names = {rule.rule_name for rule in new_rules}

    to_add: list[ArchiveRule] = []
    to_update: list[ArchiveRule] = []
    for rule in new_rules:
        if rule in old_rules:
            continue
        if rule.rule_name in old_names:
            to_update.append(rule)
        else:
            to_add.append(rule)

    def by_name(rule: ArchiveRule) -> str:
        return rule.rule_name

    return RuleDiff(
        to_remove=tuple(sorted(old_names - new_names)),
        to_add=tuple(sorted(to_add, key=by_name)),
        to_update=tuple(sorted(to_update, key=by_name)),
    )
