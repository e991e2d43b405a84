# app/content/prompts.py
"""
Textes des prompts de génération de conseils, par locale.

Table de lookup (locale, clé) → gabarit. Aucune logique de décision ici :
le choix standard / enhanced / variante est fait par
engine/feedback/prompt_variation.py.

Clés :
    standard_instructions   consigne du mode standard
    enhanced_context        cadrage "historique de notes faibles" ({avg}, {total})
    variation_1..3          consignes spécifiques à chaque variante enhanced
    traits                  contexte personnalité ({traits})
    previous_advice         conseils mal notés à ne pas répéter ({advice_list})
    user_state              état courant ({mood}, {energy}, {notes}, {locale})
    notes_none              remplissage explicite quand pas de notes
    output_instructions     consigne de sortie finale
    system                  message système du service de génération
"""
from typing import Dict, Tuple

DEFAULT_PROMPT_LOCALE = "en"

PROMPT_TEXTS: Dict[Tuple[str, str], str] = {

    # ── English ──────────────────────────────────────────────────────────────
    ("en", "system"): (
        "You are a psychology expert and personal coach. Provide concise, positive, "
        "and practical advice in English based on the user's emotional state and energy level. "
        "The advice should be 2-3 sentences, easy to understand and actionable."
    ),
    ("en", "standard_instructions"): (
        "Please analyze the user's emotional state and provide appropriate, "
        "practical, and actionable advice."
    ),
    ("en", "enhanced_context"): (
        "IMPORTANT: The user has rated previous advice with an average of {avg}/5 stars "
        "(from {total} ratings).\n"
        "This indicates the advice may not be effectively meeting their needs.\n\n"
        "Please improve the advice quality by:"
    ),
    ("en", "variation_1"): (
        "1. Analyze emotional state more deeply and provide specific, immediately actionable advice\n"
        "2. Show empathy and understanding of their unique situation\n"
        "3. Provide clear, detailed action steps they can take right now\n"
        "4. Avoid generic advice - personalize based on their personality traits"
    ),
    ("en", "variation_2"): (
        "1. Focus on practical and achievable solutions within their current circumstances\n"
        "2. Provide advice with measurable and specific outcomes\n"
        "3. Connect advice to their personal traits and preferences\n"
        "4. Suggest small but impactful activities or changes"
    ),
    ("en", "variation_3"): (
        "1. Analyze root causes of current emotional state\n"
        "2. Provide step-by-step advice with specific timelines\n"
        "3. Combine psychological and practical elements in advice\n"
        "4. Suggest ways to track and evaluate progress"
    ),
    ("en", "traits"): "User's personality traits: {traits}",
    ("en", "previous_advice"): "Previous low-rated advice patterns to avoid:\n{advice_list}",
    ("en", "user_state"): (
        "User's current state:\n"
        "- Mood: {mood}/5\n"
        "- Energy: {energy}\n"
        "- Notes: {notes}\n"
        "- Language: {locale}"
    ),
    ("en", "notes_none"): "None provided",
    ("en", "output_instructions"): (
        "Provide thoughtful, specific, and immediately actionable advice that addresses "
        "their unique situation.\n"
        "The advice must be practical, measurable, and tailored to their personality."
    ),

    # ── Tiếng Việt ───────────────────────────────────────────────────────────
    ("vi", "system"): (
        "Bạn là một chuyên gia tâm lý và coach cá nhân. Hãy đưa ra lời khuyên ngắn gọn, "
        "tích cực và thực tế bằng tiếng Việt dựa trên tình trạng cảm xúc và năng lượng "
        "của người dùng. Lời khuyên nên từ 2-3 câu, dễ hiểu và có thể thực hiện được."
    ),
    ("vi", "standard_instructions"): (
        "Hãy phân tích tình trạng cảm xúc của người dùng và đưa ra lời khuyên phù hợp, "
        "thực tế và có thể thực hiện được."
    ),
    ("vi", "enhanced_context"): (
        "QUAN TRỌNG: Người dùng đã đánh giá các lời khuyên trước đây với điểm trung bình "
        "{avg}/5 sao (từ {total} đánh giá).\n"
        "Điều này cho thấy lời khuyên có thể chưa đáp ứng hiệu quả nhu cầu của họ.\n\n"
        "Hãy cải thiện chất lượng lời khuyên bằng cách:"
    ),
    ("vi", "variation_1"): (
        "1. Phân tích sâu hơn về tình trạng cảm xúc và đưa ra lời khuyên cụ thể, có thể thực hiện ngay\n"
        "2. Thể hiện sự đồng cảm và hiểu biết về tình huống của họ\n"
        "3. Đưa ra các bước hành động rõ ràng, chi tiết mà họ có thể làm ngay lập tức\n"
        "4. Tránh lời khuyên chung chung, hãy cá nhân hóa dựa trên tính cách của họ"
    ),
    ("vi", "variation_2"): (
        "1. Tập trung vào giải pháp thực tế và khả thi trong hoàn cảnh hiện tại của họ\n"
        "2. Đưa ra lời khuyên có thể đo lường được kết quả cụ thể\n"
        "3. Kết nối lời khuyên với tính cách và sở thích cá nhân của họ\n"
        "4. Đề xuất các hoạt động hoặc thay đổi nhỏ nhưng có tác động tích cực"
    ),
    ("vi", "variation_3"): (
        "1. Phân tích nguyên nhân gốc rễ của tình trạng cảm xúc hiện tại\n"
        "2. Đưa ra lời khuyên theo từng bước với timeline cụ thể\n"
        "3. Kết hợp yếu tố tâm lý và thực tế trong lời khuyên\n"
        "4. Đề xuất cách theo dõi và đánh giá tiến bộ"
    ),
    ("vi", "traits"): "Đặc điểm tính cách của người dùng: {traits}",
    ("vi", "previous_advice"): "Các lời khuyên trước đây được đánh giá thấp (tránh lặp lại):\n{advice_list}",
    ("vi", "user_state"): (
        "Tình trạng hiện tại của người dùng:\n"
        "- Tâm trạng: {mood}/5\n"
        "- Năng lượng: {energy}\n"
        "- Ghi chú: {notes}\n"
        "- Ngôn ngữ: {locale}"
    ),
    ("vi", "notes_none"): "Không có",
    ("vi", "output_instructions"): (
        "Hãy đưa ra lời khuyên chu đáo, cụ thể và có thể thực hiện ngay lập tức để giải quyết "
        "tình huống độc đáo của họ.\n"
        "Lời khuyên phải thực tế, có thể đo lường được và phù hợp với tính cách của họ."
    ),

    # ── 日本語 ───────────────────────────────────────────────────────────────
    ("ja", "system"): (
        "あなたは心理学の専門家でありパーソナルコーチです。ユーザーの感情状態とエネルギーレベルに"
        "基づいて、簡潔で前向きで実用的なアドバイスを日本語で提供してください。"
        "アドバイスは2-3文で、理解しやすく実行可能なものにしてください。"
    ),
    ("ja", "standard_instructions"): (
        "ユーザーの感情状態を分析し、適切で実用的で実行可能なアドバイスを提供してください。"
    ),
    ("ja", "enhanced_context"): (
        "重要：ユーザーは以前のアドバイスを平均{avg}/5つ星（{total}件の評価）で評価しています。\n"
        "これは、アドバイスが効果的にニーズを満たしていない可能性があることを示しています。\n\n"
        "以下の方法でアドバイスの質を向上させてください："
    ),
    ("ja", "variation_1"): (
        "1. 感情状態をより深く分析し、具体的で即座に実行可能なアドバイスを提供する\n"
        "2. 彼らの状況に対する共感と理解を示す\n"
        "3. すぐに実行できる明確で詳細な行動ステップを提供する\n"
        "4. 一般的なアドバイスを避け、性格に基づいてパーソナライズする"
    ),
    ("ja", "variation_2"): (
        "1. 現在の状況で実用的で実現可能な解決策に焦点を当てる\n"
        "2. 具体的な結果を測定できるアドバイスを提供する\n"
        "3. アドバイスを個人の性格や好みと結び付ける\n"
        "4. 小さくても積極的な影響を与える活動や変化を提案する"
    ),
    ("ja", "variation_3"): (
        "1. 現在の感情状態の根本原因を分析する\n"
        "2. 具体的なタイムラインでステップバイステップのアドバイスを提供する\n"
        "3. アドバイスに心理的および実用的な要素を組み合わせる\n"
        "4. 進歩を追跡し評価する方法を提案する"
    ),
    ("ja", "traits"): "ユーザーの性格特性: {traits}",
    ("ja", "previous_advice"): "以前の低評価アドバイス（繰り返しを避ける）:\n{advice_list}",
    ("ja", "user_state"): (
        "ユーザーの現在の状態:\n"
        "- 気分: {mood}/5\n"
        "- エネルギー: {energy}\n"
        "- メモ: {notes}\n"
        "- 言語: {locale}"
    ),
    ("ja", "notes_none"): "なし",
    ("ja", "output_instructions"): (
        "彼らのユニークな状況に対処するための思慮深く、具体的で、すぐに実行可能なアドバイスを"
        "提供してください。\n"
        "アドバイスは実用的で、測定可能で、彼らの性格に適したものでなければなりません。"
    ),
}

# Consigne ajoutée au message système en mode "structured"
STRUCTURED_OUTPUT_SUFFIX = (
    ' Return ONLY strict JSON: {"advice": string, "suggested_habit": string, '
    '"template_type": "supportive_advice" | "neutral_boost" | "positive_reinforcement"}.'
)


def get_text(locale: str, key: str) -> str:
    """Gabarit pour (locale, key). Locale inconnue → anglais."""
    text = PROMPT_TEXTS.get((locale, key))
    if text is None:
        text = PROMPT_TEXTS[(DEFAULT_PROMPT_LOCALE, key)]
    return text
