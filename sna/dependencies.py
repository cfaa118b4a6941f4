"""Service construction and FastAPI dependency providers.

Services are built once per application by ``build_services`` and stored on
``app.state.services``; routes reach them through the providers below, so
tests can swap in isolated instances.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import partial

from fastapi import Request

from config import Settings
from sna.instructions import get_instruction_template
from sna.services.completion import CompletionClient
from sna.services.converter import ConversionService
from sna.services.licenses import LicenseStore
from sna.services.mailer import LicenseMailer
from sna.services.payments import PaymentGateway, PaymentWebhookService
from sna.services.rate_limiter import RateLimiter
from sna.services.set_catalog import SetCatalogService, fetch_scryfall_sets


@dataclass
class Services:
    licenses: LicenseStore
    rate_limiter: RateLimiter
    catalog: SetCatalogService
    completion: CompletionClient
    converter: ConversionService
    gateway: PaymentGateway
    webhooks: PaymentWebhookService


def build_services(settings: Settings) -> Services:
    """Wire the application's services from settings."""
    licenses = LicenseStore(storage_file=settings.license_store_file, seed_keys=settings.seed_licenses)
    rate_limiter = RateLimiter(
        max_requests=settings.rate_max_requests,
        window_seconds=settings.rate_window_seconds,
        sweep_interval_seconds=settings.rate_sweep_interval_seconds,
    )
    catalog = SetCatalogService(
        fetcher=partial(fetch_scryfall_sets, settings=settings),
        ttl_seconds=settings.sets_cache_ttl,
    )
    completion = CompletionClient(settings)
    converter = ConversionService(
        licenses=licenses,
        rate_limiter=rate_limiter,
        catalog=catalog,
        completion=completion,
        instructions=get_instruction_template(settings.instruction_version),
        candidate_limit=settings.candidate_limit,
    )
    gateway = PaymentGateway(settings.stripe_secret_key, settings.stripe_webhook_secret)
    mailer = LicenseMailer(settings.resend_api_key, settings.email_from, url=settings.resend_url)
    webhooks = PaymentWebhookService(
        gateway=gateway,
        licenses=licenses,
        mailer=mailer,
        allow_unverified=settings.allow_unverified_webhooks and not settings.is_production,
    )
    return Services(
        licenses=licenses,
        rate_limiter=rate_limiter,
        catalog=catalog,
        completion=completion,
        converter=converter,
        gateway=gateway,
        webhooks=webhooks,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_converter(request: Request) -> ConversionService:
    return get_services(request).converter


def get_license_store(request: Request) -> LicenseStore:
    return get_services(request).licenses


def get_rate_limiter(request: Request) -> RateLimiter:
    return get_services(request).rate_limiter


def get_payment_gateway(request: Request) -> PaymentGateway:
    return get_services(request).gateway


def get_webhook_service(request: Request) -> PaymentWebhookService:
    return get_services(request).webhooks
