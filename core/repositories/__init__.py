"""
Repositories do core.

Localização: core/repositories/

Repositories são a camada de acesso a dados. Cada repository representa
uma collection do MongoDB e isola o resto da aplicação do driver.
"""
from .base_repository import BaseRepository
from .audit_log_repository import AuditLogRepository

__all__ = ['BaseRepository', 'AuditLogRepository']
