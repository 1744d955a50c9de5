"""
rentmatch: motor de compatibilidad entre inquilinos y propiedades.

Calcula un score 0-100 por par usuario x propiedad a partir de las
preferencias guardadas del usuario y los atributos del listing.
"""

__version__ = "0.1.0"
