from .service import FileCabinetService

__all__ = ["FileCabinetService"]
