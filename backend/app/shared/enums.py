# app/shared/enums.py
"""
Toutes les énumérations du projet.

Source unique de vérité pour les niveaux d'énergie, types de template,
fenêtres temporelles et locales.
Importé par les modèles, schemas, services et engine.
"""

from enum import Enum


class EnergyLevel(str, Enum):
    LOW  = "Low"
    MID  = "Mid"
    HIGH = "High"


class TemplateType(str, Enum):
    SUPPORTIVE_ADVICE      = "supportive_advice"       # mood ≤ 2
    NEUTRAL_BOOST          = "neutral_boost"           # mood = 3
    POSITIVE_REINFORCEMENT = "positive_reinforcement"  # mood ≥ 4
    GENERAL_ADVICE         = "general_advice"


class TimeRange(str, Enum):
    LAST_7_DAYS  = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    ALL          = "all"


class Locale(str, Enum):
    VI = "vi"
    EN = "en"
    JA = "ja"


class AdviceOutputMode(str, Enum):
    TEXT       = "text"         # Conseil en texte libre
    STRUCTURED = "structured"   # {advice, suggested_habit, template_type}
