"""
Decorators do core.

Localização: core/decorators/
"""
from .audit_log import audit_log
