"""Core: configuración, errores, dominio y contratos.

Por qué:
- No depende de httpx ni de la CLI salvo en los contratos del dispatcher.
"""
