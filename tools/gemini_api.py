# tools/gemini_api.py
import requests
from core.config import settings


class GeminiError(Exception):
    """The Generative Language API could not produce a usable answer."""


def generate_content(prompt: str, api_key: str, max_output_tokens: int = 500, temperature: float = 0.7) -> str:
    """
    Sends a single-turn prompt to the Generative Language API and returns the
    text of the first candidate. Raises GeminiError on transport errors,
    non-2xx responses and payloads without candidate text.
    """
    print(f"---TOOL: Calling Gemini model '{settings.gemini_model}'---")
    url = f"{settings.gemini_base_url}/models/{settings.gemini_model}:generateContent"
    payload = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "maxOutputTokens": max_output_tokens,
            "temperature": temperature,
        },
    }

    try:
        response = requests.post(
            url,
            params={"key": api_key},
            json=payload,
            timeout=settings.gemini_timeout_seconds,
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as e:
        raise GeminiError(f"Gemini request failed: {e}") from e
    except ValueError as e:
        raise GeminiError(f"Gemini returned a non-JSON body: {e}") from e

    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise GeminiError(f"Error processing Gemini response: {e}") from e
    if not isinstance(text, str) or not text.strip():
        raise GeminiError("Gemini returned an empty candidate.")
    return text
