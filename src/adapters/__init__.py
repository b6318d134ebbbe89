"""Adaptadores de I/O (HTTP).

Por qué un paquete:
- Aísla httpx del dominio: builder del cliente, dispatcher con rate limit y
  accessor tipado de la API.
"""
