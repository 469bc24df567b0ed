"""Configuración centralizada de la calculadora.

Cada valor puede sobreescribirse con una variable de entorno con prefijo
``CALCULADORA_`` (p. ej. ``CALCULADORA_DEFAULT_ANGLE_MODE=rad``).
"""

import os

# Modo angular inicial: "deg" | "rad"
DEFAULT_ANGLE_MODE = os.getenv("CALCULADORA_DEFAULT_ANGLE_MODE", "deg").lower()

# Formato del resultado
DISPLAY_MAX_LENGTH = int(os.getenv("CALCULADORA_DISPLAY_MAX_LENGTH", "12"))  # caracteres
EXPONENTIAL_DIGITS = int(os.getenv("CALCULADORA_EXPONENTIAL_DIGITS", "6"))  # decimales

# Límites de entrada
MAX_INPUT_LENGTH = int(os.getenv("CALCULADORA_MAX_INPUT_LENGTH", "1000"))
MAX_EXPRESSION_DEPTH = int(
    os.getenv("CALCULADORA_MAX_EXPRESSION_DEPTH", "100")
)  # paréntesis y signos anidados

# Logging
LOG_LEVEL = os.getenv("CALCULADORA_LOG_LEVEL", "WARNING")
LOG_FILE = os.getenv("CALCULADORA_LOG_FILE") or None

# Texto mostrado en pantalla cuando una operación falla
ERROR_SENTINEL = "Error"
