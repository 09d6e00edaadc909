"""Pieces shared by the recipe API and the recipe client."""
