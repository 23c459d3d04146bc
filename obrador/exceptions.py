# Obrador - Exceptions
# Error taxonomy for the timesheet engine, mapped to HTTP at the app boundary

from typing import Optional


class TimesheetError(Exception):
    """
    Base class for every error the engine surfaces.
    
    Each subclass carries a default human-readable (Spanish) message and
    the HTTP status the API answers with.
    """
    
    status_code: int = 400
    default_message: str = "No se pudo procesar la solicitud"
    retryable: bool = False
    
    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TimesheetError):
    """Input does not match the expected shape."""
    status_code = 400
    default_message = "Datos invalidos"


class InvalidSchedule(ValidationError):
    """A start or end time is not a valid HH:MM clock time."""
    default_message = "Horarios invalidos"


class EmptyDuration(ValidationError):
    """The shift computes to no duration."""
    default_message = "La duracion debe ser mayor a 0"


class RecordNotFound(TimesheetError):
    status_code = 404
    default_message = "Registro no encontrado"


class Forbidden(TimesheetError):
    """The actor may not act on this record (not the owner, no permission)."""
    status_code = 403
    default_message = "No podes editar este registro"


class EditWindowExpired(TimesheetError):
    """The owner's edit window has closed."""
    status_code = 403
    default_message = "Solo podes editar durante las primeras 24 horas"


class StoreUnavailable(TimesheetError):
    """Transient storage failure; the caller may retry."""
    status_code = 503
    default_message = "El almacenamiento no esta disponible, intenta nuevamente"
    retryable = True
