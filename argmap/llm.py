"""Gemini client for the upstream argument-analysis request."""

from __future__ import annotations

import asyncio
import logging
import os

import google.generativeai as genai

from .errors import APIError, ConfigError
from .utils import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
CHAT_MODEL_RAW = os.getenv("CHAT_MODEL", "models/gemini-2.0-flash-exp")
if CHAT_MODEL_RAW.startswith(("models/", "tunedModels/")):
    CHAT_MODEL = CHAT_MODEL_RAW
else:
    CHAT_MODEL = f"models/{CHAT_MODEL_RAW}"

if GEMINI_API_KEY:
    genai.configure(api_key=GEMINI_API_KEY)
else:
    logger.warning("GEMINI_API_KEY not set; analysis requests will fail.")

SYSTEM_PROMPT = """You are an expert in logic and argument analysis. Your task is to break down arguments into their logical components.

Respond with ONLY a valid JSON object and nothing else. No explanations, no text before or after the JSON.

The JSON must follow this format:
{
  "premises": [
    {"id": "p1", "title": "Human mortality", "text": "All humans are mortal", "type": "axiom"}
  ],
  "connections": [
    {"id": "c1", "source": "p1", "target": "p2", "strength": "strong"}
  ],
  "conclusion": "Socrates is mortal"
}

Premise types:
- axiom: a self-evident truth that needs no proof
- assumption: a statement accepted as true for the sake of argument
- intermediate: a logical step that leads to the final conclusion
- conclusion: the final claim

Connection strength is one of "strong", "moderate" or "weak".

All connections must form a directed acyclic graph that leads to the conclusion.
Include the conclusion as the last entry of "premises" with type "conclusion" and id "conclusion".
Every premise must be connected to at least one other premise or the conclusion."""


def _user_prompt(argument_text: str) -> str:
    return (
        "Analyze this argument and respond ONLY with the JSON format specified "
        f'in the instructions: "{argument_text.strip()}"'
    )


def call_llm(system_prompt: str, user_prompt: str) -> str:
    """Call the Gemini model and return raw text."""
    if not GEMINI_API_KEY:
        raise ConfigError("GEMINI_API_KEY is missing.")
    model = genai.GenerativeModel(CHAT_MODEL)
    prompt = f"System:\n{system_prompt.strip()}\n\nUser:\n{user_prompt.strip()}"
    try:
        response = model.generate_content(
            prompt,
            generation_config=genai.types.GenerationConfig(
                temperature=0.2,
                top_p=0.9,
                response_mime_type="application/json",
            ),
        )
    except Exception as exc:  # noqa: BLE001
        raise APIError(f"Gemini request failed: {exc}") from exc
    if not response.candidates:
        raise APIError("No candidates returned from Gemini.")
    parts = response.candidates[0].content.parts
    text = "".join(getattr(part, "text", "") for part in parts)
    if not text.strip():
        raise APIError("Empty Gemini response.")
    return text


def request_analysis(argument_text: str) -> str:
    """Ask the model to decompose ``argument_text``; returns the raw response text."""
    if not argument_text.strip():
        raise ValueError("Argument text must be non-empty")
    return call_llm(SYSTEM_PROMPT, _user_prompt(argument_text))


async def fetch_analysis(argument_text: str) -> str:
    return await asyncio.to_thread(request_analysis, argument_text)
