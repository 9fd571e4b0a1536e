"""
Services do core.

Localização: core/services/
"""
from .audit_log_service import AuditLogService

__all__ = ['AuditLogService']
