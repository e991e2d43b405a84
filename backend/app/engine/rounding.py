# engine/rounding.py
"""
Arrondi "half-up" déterministe pour tous les chiffres affichés.

round() de Python arrondit au pair (round(1.25, 1) == 1.2) : les moyennes
d'entiers tombent souvent pile sur .x5, on veut 1.3 quelle que soit la
plateforme ou la locale.
"""
import math


def round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
