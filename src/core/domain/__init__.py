"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras y estrictas (Pydantic v2).
- El dominio no conoce httpx, pytest ni la CLI: solo el contrato de la API.
"""
