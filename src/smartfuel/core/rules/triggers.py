"""Trigger expression parsing: ``"<signal> <op> <number>"`` -> Trigger."""

from __future__ import annotations

import logging
import re

from smartfuel.core.rules.models import ComparisonOperator, Trigger

logger = logging.getLogger(__name__)

TRIGGER_PATTERN = re.compile(r"^(\w+)\s*([><=]+)\s*(\d+(\.\d+)?)$")


def parse_trigger(expression: str) -> Trigger | None:
    """Parse a single trigger expression.

    Returns None (and logs a warning) for anything outside the grammar,
    including operator tokens the grammar admits but that are not supported
    comparisons, e.g. ``=>`` or ``=``.
    """
    if not isinstance(expression, str):
        logger.warning("Invalid trigger format (not a string): %r", expression)
        return None

    match = TRIGGER_PATTERN.fullmatch(expression)
    if not match:
        logger.warning("Invalid trigger format: %s", expression)
        return None

    signal, op_token, threshold = match.group(1), match.group(2), match.group(3)
    try:
        op = ComparisonOperator(op_token)
    except ValueError:
        logger.warning("Unsupported trigger operator %r in: %s", op_token, expression)
        return None

    return Trigger(signal=signal, operator=op, threshold=float(threshold), source=expression)


def parse_triggers(expressions: list[str]) -> tuple[list[Trigger], list[str]]:
    """Parse a theme's trigger list.

    Returns: (valid_triggers, rejected_expressions)
    """
    valid: list[Trigger] = []
    rejected: list[str] = []
    for expression in expressions:
        trigger = parse_trigger(expression)
        if trigger is None:
            rejected.append(str(expression))
        else:
            valid.append(trigger)
    return valid, rejected
