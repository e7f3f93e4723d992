"""
schemas/ — Pydantic request/response models for the inquiry API

Provides input validation, auto-generated OpenAPI docs, and the wire
shapes the assignment board consumes on the client side.
"""
