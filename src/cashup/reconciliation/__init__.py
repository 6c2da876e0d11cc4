"""
Reconciliation Package

The employee cash-up wizard and the manager review workflow.

This package provides:
- Draft and record models
- The step-by-step reconciliation wizard with autosave
- Review transitions (approve, reject, edit and recompute) and list views
- An outbox so submissions survive a gateway outage
- Local JSON and in-memory storage adapters
"""

from .datastore import (
    InMemoryAutosave,
    InMemoryGateway,
    InMemoryOutboxStore,
    JsonAutosaveStore,
    JsonOutboxStore,
    JsonRecordGateway,
)
from .models import (
    ReconciliationCalculations,
    ReconciliationDraft,
    ReconciliationRecord,
    ReconciliationStatus,
    ReconciliationSummary,
    RegisterEntry,
    TerminalEntry,
)
from .outbox import Outbox, SyncReport
from .ports import ConfigProvider, GatewayResponse, LocalAutosave, OutboxStore, SubmissionGateway
from .review import ReviewBoard
from .wizard import ReconciliationWizard, StepDescriptor, StepKind, SubmissionResult, build_steps
from .workflow import (
    FinancialEdits,
    WorkflowResult,
    WorkflowTransitionError,
    approve,
    edit_and_recompute,
    filter_by_status,
    initial_status,
    reject,
    sort_records,
)

__all__ = [
    "ConfigProvider",
    "FinancialEdits",
    "GatewayResponse",
    "InMemoryAutosave",
    "InMemoryGateway",
    "InMemoryOutboxStore",
    "JsonAutosaveStore",
    "JsonOutboxStore",
    "JsonRecordGateway",
    "LocalAutosave",
    "Outbox",
    "OutboxStore",
    "ReconciliationCalculations",
    "ReconciliationDraft",
    "ReconciliationRecord",
    "ReconciliationStatus",
    "ReconciliationSummary",
    "ReconciliationWizard",
    "RegisterEntry",
    "ReviewBoard",
    "StepDescriptor",
    "StepKind",
    "SubmissionGateway",
    "SubmissionResult",
    "SyncReport",
    "TerminalEntry",
    "WorkflowResult",
    "WorkflowTransitionError",
    "approve",
    "build_steps",
    "edit_and_recompute",
    "filter_by_status",
    "initial_status",
    "reject",
    "sort_records",
]
