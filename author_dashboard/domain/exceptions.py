from __future__ import annotations


class DomainError(Exception):
    """Base para erros de dominio."""


class IdentityUnavailableError(DomainError):
    """Nao foi possivel identificar o usuario atual."""


class UnknownPlanError(DomainError):
    """Plano nao existe na configuracao atual."""


class SubscriptionUnavailableError(DomainError):
    """Falha de transporte ao ler a assinatura."""


class FeatureAccessDeniedError(DomainError):
    """Feature nao liberada para o plano do usuario."""


class DomainFetchFailedError(DomainError):
    def __init__(self, domain_id: str, reason: str):
        super().__init__(f"{domain_id}: {reason}")
        self.domain_id = domain_id
        self.reason = reason


class AggregationTimeoutError(DomainFetchFailedError):
    """Busca de um dominio excedeu o timeout."""


class MandatoryDomainFetchFailedError(DomainFetchFailedError):
    """Dominio obrigatorio falhou; o dashboard nao pode ser montado."""
