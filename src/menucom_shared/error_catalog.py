"""
Catálogo centralizado de errores controlados del servicio de pagos.
Los códigos viajan en el campo `details.code` de las respuestas de error.
"""

ERROR_CATALOG = {
    "CHECK_001": {
        "title": "Orden Inválida",
        "description": "La orden no tiene productos o alguno tiene precio o cantidad inválidos.",
        "http_code": 400,
        "solution": "Revisar los productos del carrito antes de confirmar.",
    },
    "CHECK_002": {
        "title": "Datos Inválidos",
        "description": "El cuerpo de la solicitud no cumple con el formato esperado.",
        "http_code": 400,
        "solution": "Verificar los campos enviados contra la documentación de la API.",
    },
    "PAYMENT_001": {
        "title": "Pago Fallido",
        "description": "MercadoPago rechazó la solicitud o no respondió a tiempo.",
        "http_code": 502,
        "solution": "Reintentar más tarde o con otro método de pago.",
    },
    "CONFIG_001": {
        "title": "Configuración Incompleta",
        "description": "Faltan credenciales de MercadoPago u otras variables requeridas.",
        "http_code": 500,
        "solution": "Revisar MP_ACCESS_TOKEN y las variables MERCADO_PAGO_* del despliegue.",
    },
    "SYSTEM_001": {
        "title": "Error Interno",
        "description": "Excepción no controlada en el servidor (Bug o falla de infraestructura).",
        "http_code": 500,
        "solution": "Revisar logs del servicio de pagos.",
    },
}


def error_details(code: str) -> dict[str, str]:
    """Details payload for an error response, keyed by catalog code."""
    entry = ERROR_CATALOG.get(code, ERROR_CATALOG["SYSTEM_001"])
    return {"code": code, "title": entry["title"]}
