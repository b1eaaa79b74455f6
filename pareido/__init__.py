"""Pareido: turn photos into Symbiote cards with Gemini."""
