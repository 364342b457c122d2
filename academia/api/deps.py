from fastapi import Depends

from academia.core.backends import get_identity, get_store
from academia.core.config import settings
from academia.finance.ledger import Ledger
from academia.finance.reconciler import FinanceReconciler
from academia.services.assessments import AssessmentService
from academia.services.clients import ClientService
from academia.services.identity import IdentityProvider
from academia.services.plans import PlanService
from academia.services.subscriptions import SubscriptionService
from academia.store.base import DocumentStore


def get_reconciler(store: DocumentStore = Depends(get_store)) -> FinanceReconciler:
    return FinanceReconciler(store)


def get_ledger(store: DocumentStore = Depends(get_store)) -> Ledger:
    return Ledger(store, default_plan_period=settings.DEFAULT_PLAN_PERIOD)


def get_client_service(
    store: DocumentStore = Depends(get_store),
    identity: IdentityProvider = Depends(get_identity),
) -> ClientService:
    return ClientService(store, identity)


def get_subscription_service(store: DocumentStore = Depends(get_store)) -> SubscriptionService:
    return SubscriptionService(store)


def get_plan_service(store: DocumentStore = Depends(get_store)) -> PlanService:
    return PlanService(store)


def get_assessment_service(store: DocumentStore = Depends(get_store)) -> AssessmentService:
    return AssessmentService(store)
