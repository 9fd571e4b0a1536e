"""
Decorator para auditoria de métodos de services.

Localização: core/decorators/audit_log.py

Chamadas que retornam None ou False (nada encontrado) não geram log.
O método decorado deve pertencer a um service com o atributo
`audit_service` e receber `church_id` (posicional logo após self, ou
como kwarg).
"""
from functools import wraps
from typing import Callable


def audit_log(action: str, entity: str):
    """
    Registra sucesso ou erro da chamada no AuditLogService do service.

    Args:
        action: Tipo de ação ('pay_installment', 'create_schedule', etc.)
        entity: Entidade relacionada ('transaction', 'schedule', etc.)

    Exemplo de uso:
        @audit_log(action='pay_installment', entity='transaction')
        def pay_installment(self, church_id, transaction_id):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            church_id = kwargs.get('church_id', args[0] if args else None)

            try:
                result = func(self, *args, **kwargs)
            except Exception as e:
                self.audit_service.log_error(
                    church_id=church_id,
                    action=action,
                    entity=entity,
                    error=e
                )
                raise

            # Nada encontrado ou alterado: não há o que auditar
            if result is None or result is False:
                return result

            entity_id = None
            if isinstance(result, dict) and '_id' in result:
                entity_id = result['_id']

            self.audit_service.log_action(
                church_id=church_id,
                action=action,
                entity=entity,
                entity_id=entity_id,
                status='success'
            )
            return result

        return wrapper
    return decorator
