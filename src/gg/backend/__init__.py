"""Licensing backend: Stripe subscriptions and gg Pro license keys.

Run with: uvicorn gg.backend.app:app
"""
