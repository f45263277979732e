"""CLI (Typer + Rich).

Por qué separada:
- La librería no depende de la CLI; la CLI solo compone adaptadores.
"""
