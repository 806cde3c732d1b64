"""
Background Jobs
================
Billing aggregation and its scheduler.
"""

from usage_billing.jobs.aggregation import AggregationResult, BillingAggregationJob
from usage_billing.jobs.scheduler import JobScheduler, run_scheduler

__all__ = ["AggregationResult", "BillingAggregationJob", "JobScheduler", "run_scheduler"]
