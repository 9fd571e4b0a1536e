"""
Services do app finance.

Localização: finance/services/

Services contêm a lógica de negócio do controle de parcelas. Eles:
- Orquestram chamadas a repositories
- Aplicam regras de negócio
- Validam dados

NÃO devem acessar diretamente o MongoDB, apenas via repositories.
"""
from .installment_stats import compute_installment_stats, filter_installment_groups
from .installment_service import InstallmentService, build_installment_plan, preview_installment_plan

__all__ = [
    'InstallmentService',
    'compute_installment_stats',
    'filter_installment_groups',
    'build_installment_plan',
    'preview_installment_plan',
]
