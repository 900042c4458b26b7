"""Vitrine: small admin panel over flat JSON files (articles + background)."""
