"""
Travel Crew Backend — API Schemas
===================================

Pydantic models describing what the API returns. Request bodies are
multipart forms and are checked by services.validators instead.
"""
