# agents/field_assistant.py

from typing import Callable, List, Optional, Tuple
from langchain_core.prompts import PromptTemplate
from core.config import settings
from core.errors import InvalidRequestError
from core.models import ChatbotRequest
from tools.gemini_api import GeminiError, generate_content

GREETING = (
    "Hello! I'm your AI field assistant. I can help you analyze your data, answer questions "
    "about best practices, and provide insights about your field records."
)

TEMPERATURE_RESPONSE = (
    "For temperature measurements, ensure your sensors are calibrated and protected from direct sunlight. "
    "Normal soil temperatures range from 50-80°F depending on season and depth. "
    "Consider measuring at multiple depths for better insights."
)
HUMIDITY_RESPONSE = (
    "Humidity levels are crucial for crop health. Ideal relative humidity varies by crop but generally "
    "ranges from 40-70%. High humidity can lead to fungal issues, while low humidity may stress plants. "
    "Monitor throughout the day as levels fluctuate."
)
SOIL_RESPONSE = (
    "Soil pH affects nutrient availability. Most crops prefer slightly acidic to neutral soil (pH 6.0-7.0). "
    "Test soil pH regularly and consider amendments like lime to raise pH or sulfur to lower it. "
    "Take samples from multiple locations for accuracy."
)
DATA_RESPONSE = (
    "Consistent data collection is key to successful field management. Record measurements at the same "
    "time daily when possible, maintain detailed location notes, and look for patterns over time. "
    "Your data helps identify trends and optimize practices."
)
HELP_RESPONSE = (
    "I'm here to help with your field data questions! I can provide insights on temperature, humidity, "
    "soil conditions, and data collection best practices. Feel free to ask about specific measurements "
    "or general field management guidance."
)
GENERIC_RESPONSE = (
    "Thank you for your question! I can provide general guidance on field data practices. "
    "Please ensure consistent data collection timing, record detailed location information, "
    "and look for patterns in your data over time. For specific technical questions, consider "
    "consulting with agricultural extension services or field specialists."
)


def _mentions(*keywords: str) -> Callable[[str], bool]:
    return lambda text: any(k in text for k in keywords)


# Evaluated top to bottom against the lowercased message; the first match wins.
FALLBACK_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (_mentions("temperature"), TEMPERATURE_RESPONSE),
    (_mentions("humidity"), HUMIDITY_RESPONSE),
    (_mentions("soil", "ph"), SOIL_RESPONSE),
    (_mentions("data", "record"), DATA_RESPONSE),
    (_mentions("help", "how"), HELP_RESPONSE),
]


def classify_message(message: str) -> str:
    """Picks the canned reply for a message. Stateless; ignores conversation history."""
    text = message.lower()
    for matches, response in FALLBACK_RULES:
        if matches(text):
            return response
    return GENERIC_RESPONSE


class FieldAssistant:
    """
    Answers field data questions. Delegates to Gemini when a key is available and
    falls back to keyword-matched guidance when it is not, or when the call fails.
    """

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.google_api_key
        self.prompt = PromptTemplate.from_template(
            """You are a helpful AI assistant specializing in field data collection and analysis. You help users understand their agricultural or scientific field data, provide insights, and offer guidance on best practices. Keep responses concise and practical.

User: {message}"""
        )

    def resolve(self, request: ChatbotRequest) -> str:
        print("---FIELD ASSISTANT---")
        if not (request.message or "").strip() or not (request.user_id or "").strip():
            raise InvalidRequestError("Missing required fields")

        api_key = request.api_key or self.api_key
        if not api_key:
            print("---FIELD ASSISTANT: No API key configured, using canned guidance---")
            return classify_message(request.message)

        try:
            return generate_content(
                self.prompt.format(message=request.message),
                api_key,
                max_output_tokens=500,
                temperature=0.7,
            )
        except GeminiError as e:
            print(f"---FIELD ASSISTANT: Gemini call failed, using canned guidance: {e}---")
            return classify_message(request.message)
