# app/content/fallback_advice.py
"""
Conseils de repli déterministes, servis quand le service de génération échoue.

Indexés par bande d'humeur (même découpage que le template_type) puis locale.
Toujours du texte : l'utilisateur ne voit jamais d'erreur brute.
"""
from typing import Dict, Tuple

from app.shared.enums import TemplateType

FALLBACK_ADVICE: Dict[TemplateType, Dict[str, str]] = {
    TemplateType.SUPPORTIVE_ADVICE: {
        "vi": (
            "Có vẻ như bạn đang trải qua thời gian khó khăn. Hãy nhớ rằng cảm xúc này sẽ qua đi. "
            "Thử nghỉ ngơi một chút hoặc làm điều gì đó nhỏ nhặt mà bạn yêu thích."
        ),
        "en": (
            "It looks like you are going through a hard time. Remember that this feeling will pass. "
            "Try taking a short break or doing one small thing you enjoy."
        ),
        "ja": (
            "つらい時期を過ごしているようですね。この気持ちはいずれ過ぎ去ります。"
            "少し休むか、好きな小さなことをしてみてください。"
        ),
    },
    TemplateType.NEUTRAL_BOOST: {
        "vi": (
            "Tâm trạng bình thường cũng là điều tốt. Đôi khi một thay đổi nhỏ có thể tạo ra "
            "sự khác biệt lớn. Hãy thử đi dạo hoặc nghe nhạc yêu thích."
        ),
        "en": (
            "A neutral mood is a fine place to be. Sometimes a small change makes a big difference. "
            "Try a short walk or your favourite music."
        ),
        "ja": (
            "普通の気分も良いことです。小さな変化が大きな違いを生むことがあります。"
            "散歩をしたり、好きな音楽を聴いたりしてみてください。"
        ),
    },
    TemplateType.POSITIVE_REINFORCEMENT: {
        "vi": (
            "Thật tuyệt khi bạn cảm thấy tốt! Hãy duy trì động lực tích cực này. "
            "Có điều gì nhỏ bạn có thể làm để giữ vững cảm giác này không?"
        ),
        "en": (
            "Great to hear you are feeling good! Keep this positive momentum going. "
            "Is there one small thing you can do to hold on to this feeling?"
        ),
        "ja": (
            "気分が良いのは素晴らしいことです！この前向きな勢いを保ちましょう。"
            "この気持ちを維持するためにできる小さなことはありますか？"
        ),
    },
}


def template_type_for_mood(mood_score: int) -> TemplateType:
    if mood_score <= 2:
        return TemplateType.SUPPORTIVE_ADVICE
    if mood_score == 3:
        return TemplateType.NEUTRAL_BOOST
    return TemplateType.POSITIVE_REINFORCEMENT


def get_fallback_advice(mood_score: int, locale: str = "vi") -> Tuple[TemplateType, str]:
    """(template_type, message) pour une humeur donnée. Locale inconnue → vi."""
    template_type = template_type_for_mood(mood_score)
    messages = FALLBACK_ADVICE[template_type]
    return template_type, messages.get(locale, messages["vi"])
