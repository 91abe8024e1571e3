"""Reachability analysis over the bundled module graph."""

from __future__ import annotations

import logging
import re
from typing import List, Mapping, Set

from .logging import VERBOSE, get_logger
from .models import AggregationError, ShakePolicy
from .resolver import DYNAMIC_IMPORT_RE, STATIC_IMPORT_RE, split_lines

EXPORT_FROM_RE = re.compile(r"""export .*? from ['"]([^'"]+)['"]""")


def find_references(source: str, policy: ShakePolicy) -> List[str]:
    """Return the specifiers ``source`` depends on under ``policy``, in scan order."""
    lines = split_lines(source)
    if policy is ShakePolicy.EXPORT_ONLY:
        return [m.group(1) for m in map(EXPORT_FROM_RE.search, lines) if m]
    static = [m.group(2) for m in map(STATIC_IMPORT_RE.search, lines) if m]
    dynamic = [m.group(2) for m in map(DYNAMIC_IMPORT_RE.search, lines) if m]
    return static + dynamic


def reachable_from(
    declarations: Mapping[str, str],
    entry: str,
    policy: ShakePolicy,
    *,
    logger: logging.Logger | None = None,
) -> List[str]:
    """Return the modules reachable from ``entry`` in depth-first pre-order.

    References to modules outside ``declarations`` (third-party packages)
    are not followed.
    """
    log = logger or get_logger("shaker")
    if policy is ShakePolicy.OFF:
        return list(declarations)
    if entry not in declarations:
        raise AggregationError(f'Entry module "{entry}" is not among generated declarations')

    visited: Set[str] = set()
    ordered: List[str] = []
    stack = [entry]
    while stack:
        module = stack.pop()
        if module in visited:
            continue
        visited.add(module)
        ordered.append(module)

        refs = find_references(declarations[module], policy)
        log.log(VERBOSE, '"%s" references %s', module, refs)
        for ref in reversed(refs):
            if ref in visited:
                continue
            if ref not in declarations:
                log.debug('Skipping "%s": not part of the bundle', ref)
                continue
            stack.append(ref)
    return ordered


__all__ = ["EXPORT_FROM_RE", "find_references", "reachable_from"]
