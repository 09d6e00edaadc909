"""Prompt service: turns a recipe name into a Hindi recipe via Gemini."""
