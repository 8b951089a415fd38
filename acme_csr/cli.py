"""
Administrative commands

Usage:
    acme-csr cache:warm --strategy priority --sync
    acme-csr search:index --entity campaigns --tenant <tenant id>
    acme-csr user:promote admin@example.com --role admin
"""

import argparse
import asyncio
import sys

from .core.context import tenant_scope
from .core.logging import configure_logging
from .db.database import SessionLocal
from .domain.enums import TenantStatus, UserRole
from .domain.exceptions import DomainException


async def _in_tenant(tenant_id, work):
    from .infrastructure.tenancy.resolver import tenant_context_by_id

    context = await tenant_context_by_id(tenant_id, SessionLocal)
    with tenant_scope(context):
        return await work()


def _uow():
    from .infrastructure.repositories.unit_of_work_impl import unit_of_work_factory

    return unit_of_work_factory()()


def cache_warm(args):
    from .application.dtos.cache_dtos import CacheWarmRequestDTO
    from .application.use_cases.cache_use_cases import RunCacheWarmingUseCase, StartCacheWarmingUseCase
    from .infrastructure.factories import build_cache_repository, build_warming_tracker
    from .infrastructure.queue.celery_job_queue import CeleryJobQueue

    async def work():
        repository = build_cache_repository()
        if args.sync:
            return await RunCacheWarmingUseCase(repository).execute(args.strategy)
        use_case = StartCacheWarmingUseCase(repository, CeleryJobQueue(), build_warming_tracker())
        return await use_case.execute(CacheWarmRequestDTO(strategy=args.strategy))

    result = asyncio.run(_in_tenant(args.tenant, work))
    if args.sync:
        print(f"Cache warming {result.status}: {result.current_item}/{result.total_items} keys ({result.percentage}%)")
        for key in result.failed_keys:
            print(f"  failed: {key}")
        return result.status != "failed"
    print(f"Cache warming queued as job {result.job_id}")
    return True


def cache_status(args):
    from .application.use_cases.cache_use_cases import GetCacheStatusUseCase
    from .infrastructure.factories import build_cache_repository

    async def work():
        return await GetCacheStatusUseCase(build_cache_repository()).execute()

    status = asyncio.run(_in_tenant(args.tenant, work))
    print(f"Warmed ({len(status.warmed)}):")
    for key in status.warmed:
        print(f"  {key}")
    print(f"Cold ({len(status.cold)}):")
    for key in status.cold:
        print(f"  {key}")
    if "hit_rate" in status.stats:
        print(f"Hit rate: {status.stats['hit_rate']}%")
    return True


def currency_update_rates(args):
    from .application.use_cases.currency_use_cases import UpdateExchangeRatesUseCase
    from .infrastructure.external_services.exchange_rate_service import ExchangeRateService

    async def work():
        return await UpdateExchangeRatesUseCase(_uow(), ExchangeRateService()).execute()

    result = asyncio.run(_in_tenant(args.tenant, work))
    print(f"Updated: {', '.join(result.updated) or '-'}")
    print(f"Failed: {', '.join(result.failed) or '-'}")
    return not result.failed


def notifications_sample(args):
    from .application.use_cases.notification_use_cases import SendSampleNotificationsUseCase

    async def work():
        return await SendSampleNotificationsUseCase(_uow()).execute(args.user, args.count)

    notifications = asyncio.run(_in_tenant(args.tenant, work))
    print(f"Created {len(notifications)} notifications for {args.user}")
    return True


def search_index(args):
    from .application.use_cases.search_use_cases import ReindexEntityUseCase, entities_for
    from .infrastructure.factories import build_search_engine

    async def work():
        engine = build_search_engine()
        return [await ReindexEntityUseCase(_uow(), engine).execute(entity) for entity in entities_for(args.entity)]

    for result in asyncio.run(_in_tenant(args.tenant, work)):
        print(f"{result.entity}: {result.documents} documents indexed into {result.index}")
    return True


def tenants_provision(args):
    from .application.use_cases.tenant_use_cases import GetOrganizationTenantUseCase, ProvisionTenantUseCase
    from .infrastructure.factories import build_search_engine
    from .infrastructure.repositories.unit_of_work_impl import unit_of_work_factory
    from .infrastructure.tenancy.provisioner import TenantDatabaseProvisioner
    from .infrastructure.tenancy.search_index_manager import TenantSearchIndexManager

    async def work():
        tenant = await GetOrganizationTenantUseCase(_uow()).execute(args.organization_id)
        if tenant.status == TenantStatus.ACTIVE.value:
            print(f"Tenant {tenant.subdomain} is already active")
            return None
        use_case = ProvisionTenantUseCase(
            unit_of_work_factory(),
            TenantDatabaseProvisioner(),
            TenantSearchIndexManager(build_search_engine()),
        )
        return await use_case.execute(tenant.id)

    result = asyncio.run(_in_tenant(None, work))
    if result is not None:
        print(f"Tenant {result.tenant.subdomain} provisioned")
        for name, value in result.details.items():
            print(f"  {name}: {value}")
    return True


def exports_cleanup(args):
    from .application.use_cases.export_use_cases import CleanupExpiredExportsUseCase
    from .infrastructure.factories import build_storage

    async def work():
        return await CleanupExpiredExportsUseCase(_uow(), build_storage()).execute()

    removed = asyncio.run(_in_tenant(args.tenant, work))
    print(f"Removed {removed} expired exports")
    return True


def user_promote(args):
    from .application.use_cases.user_use_cases import PromoteUserUseCase

    async def work():
        return await PromoteUserUseCase(_uow()).execute(args.email, UserRole(args.role))

    user = asyncio.run(_in_tenant(args.tenant, work))
    print(f"{user.email} is now {user.role}")
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acme-csr",
        description="ACME CSR administration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add(name, help_text, tenant=True):
        sub = subparsers.add_parser(name, help=help_text)
        if tenant:
            sub.add_argument("--tenant", help="Tenant id (central database when omitted)")
        return sub

    warm = add("cache:warm", "Warm dashboard and page caches")
    warm.add_argument("--strategy", default="all", choices=["all", "system", "widget", "widgets", "priority"])
    warm.add_argument("--sync", action="store_true", help="Warm in this process instead of queueing a job")

    add("cache:status", "Show warmed and cold cache keys")
    add("currency:update-rates", "Fetch exchange rates for active currencies")

    sample = add("notifications:sample", "Create sample notifications for a user")
    sample.add_argument("--user", required=True, help="Recipient email")
    sample.add_argument("--count", type=int, default=5)

    index = add("search:index", "Rebuild search indexes from the database")
    index.add_argument("--entity", choices=["campaigns", "organizations", "users", "donations"])

    provision = add("tenants:provision", "Provision the tenant of an organization", tenant=False)
    provision.add_argument("organization_id")

    add("exports:cleanup", "Delete expired export files")

    promote = add("user:promote", "Change a user's role")
    promote.add_argument("email")
    promote.add_argument("--role", required=True, choices=[role.value for role in UserRole])

    return parser


COMMANDS = {
    "cache:warm": cache_warm,
    "cache:status": cache_status,
    "currency:update-rates": currency_update_rates,
    "notifications:sample": notifications_sample,
    "search:index": search_index,
    "tenants:provision": tenants_provision,
    "exports:cleanup": exports_cleanup,
    "user:promote": user_promote,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    configure_logging()
    try:
        return 0 if COMMANDS[args.command](args) else 1
    except DomainException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Operation cancelled", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
