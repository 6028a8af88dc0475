"""
Ownership scoping for mutating cat statements.

Admins match rows by id alone; everyone else also matches on `owner`, inside
the same statement, so "not found" and "not yours" look identical.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MutationScope:
    # None means unrestricted.
    owner_id: int | None = None


def ownership_scope(role: str, user_id: int) -> MutationScope:
    if role == "admin":
        return MutationScope()
    return MutationScope(owner_id=user_id)


def scoped_predicate(scope: MutationScope, cat_id: int, args: list[Any]) -> str:
    """
    Append the predicate's values to `args` and return the WHERE body.
    """
    args.append(cat_id)
    predicate = f"cat_id = ${len(args)}"
    if scope.owner_id is not None:
        args.append(scope.owner_id)
        predicate += f" AND owner = ${len(args)}"
    return predicate
