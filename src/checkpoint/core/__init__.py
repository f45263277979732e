"""Core del cliente: dominio, contratos y configuración.

Por qué:
- El Core no conoce httpx ni Starlette; solo conceptos de Checkpoint.
"""
