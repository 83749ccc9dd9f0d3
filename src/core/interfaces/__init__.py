"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos
  (p.ej. el origen de las credenciales).
- Permite invertir dependencias: el cliente depende de abstracciones.
"""
