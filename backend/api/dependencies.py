"""Shared dependencies for API routes."""

from services.gemini_client import GeminiGenerator


def get_generator() -> GeminiGenerator:
    return GeminiGenerator()
