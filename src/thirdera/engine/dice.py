"""Dice rolling for 3.5 SRD checks, attacks and damage.

Rolling goes through the d20 library. Attack rolls report the natural
d20 result so callers can test it against a weapon's threat range;
critical damage rolls the damage expression once per multiplier step
and adds the results together, as the SRD prescribes.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any

import d20

from thirdera.core.exceptions import DiceRollError
from thirdera.core.logging import get_logger


logger = get_logger(__name__)


def format_check_expression(modifier: int) -> str:
    """``"1d20 + 5"``, ``"1d20 - 1"`` or ``"1d20"``."""
    if modifier > 0:
        return f"1d20 + {modifier}"
    if modifier < 0:
        return f"1d20 - {abs(modifier)}"
    return "1d20"


@dataclass(frozen=True)
class DiceExpression:
    """The result of one rolled expression.

    Attributes:
        expression: The expression that was rolled.
        total: The total result of the roll.
        dice: Individual kept dice results.
        modifier: Static part of the total (total minus dice).
        natural: The natural d20 result, or None when no d20 was rolled.
        detail: d20's annotated rendering of the roll.
    """

    expression: str
    total: int
    dice: list[int]
    modifier: int
    natural: int | None = None
    detail: str = ""

    @property
    def is_natural_20(self) -> bool:
        return self.natural == 20

    @property
    def is_natural_1(self) -> bool:
        return self.natural == 1

    def threatens(self, threat_range: int = 20) -> bool:
        """Whether the natural roll falls in a critical threat range."""
        return self.natural is not None and self.natural >= threat_range


class DiceRoller:
    """Dice roller backed by the d20 library.

    Example:
        >>> roller = DiceRoller(seed=7)
        >>> result = roller.roll_check(5)
        >>> result.expression
        '1d20 + 5'
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll(self, expression: str) -> DiceExpression:
        """Roll a dice expression.

        Args:
            expression: Dice expression (e.g. ``'1d20 + 5'``, ``'2d6 + 3'``).

        Returns:
            DiceExpression containing the roll results.

        Raises:
            DiceRollError: If the expression is empty or invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(
                f"Invalid dice expression: {exc}",
                expression=expression,
            ) from exc

        dice_values, natural = self._extract_dice_values(result.expr)
        total = result.total
        logger.debug("Dice rolled", expression=expression, total=total, natural=natural)
        return DiceExpression(
            expression=expression,
            total=total,
            dice=dice_values,
            modifier=total - sum(dice_values),
            natural=natural,
            detail=result.result,
        )

    @staticmethod
    def _extract_dice_values(expr: Any) -> tuple[list[int], int | None]:
        """Collect kept dice from a d20 expression tree.

        Returns:
            Tuple of (kept dice values, first kept d20 value or None).
        """
        values: list[int] = []
        natural: int | None = None

        def traverse(node: Any) -> None:
            nonlocal natural
            if isinstance(node, d20.Dice):
                for die in node.values:
                    if not die.kept:
                        continue
                    values.append(die.number)
                    if natural is None and die.size == 20:
                        natural = die.number
            else:
                for child in getattr(node, "children", ()):
                    traverse(child)

        traverse(expr)
        return values, natural

    def roll_check(self, modifier: int) -> DiceExpression:
        """Roll a d20 check (skill, ability, save, initiative or attack)."""
        return self.roll(format_check_expression(modifier))

    def roll_damage(self, damage_expression: str, *, multiplier: int = 1) -> DiceExpression:
        """Roll damage, rolling the expression ``multiplier`` times on a critical.

        Args:
            damage_expression: Damage dice expression (e.g. ``'1d8 + 3'``).
            multiplier: Critical multiplier; 1 for a normal hit.

        Returns:
            DiceExpression containing the damage roll.
        """
        if multiplier <= 1:
            return self.roll(damage_expression)
        expression = " + ".join(f"({damage_expression})" for _ in range(multiplier))
        return self.roll(expression)


_default_roller: DiceRoller | None = None


def roll(expression: str) -> DiceExpression:
    """Roll an expression with a shared module-level roller.

    Example:
        >>> roll("1d20 + 5").total
    """
    global _default_roller  # noqa: PLW0603
    if _default_roller is None:
        _default_roller = DiceRoller()
    return _default_roller.roll(expression)


__all__ = [
    "format_check_expression",
    "DiceExpression",
    "DiceRoller",
    "roll",
]
