"""Create and drop the relational schema behind a Protean domain."""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

logger = structlog.get_logger(__name__)

_RELATIONAL_PROVIDERS = ("sqlite", "postgresql")


def _relational_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in _RELATIONAL_PROVIDERS:
            yield name, provider


def setup_db(domain: Domain) -> None:
    """Create tables for every aggregate and entity of ``domain``."""
    with domain.domain_context():
        for name, provider in _relational_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Touching ``_dao`` registers the SQLAlchemy model with the provider metadata.
            for record in list(domain.registry.aggregates.values()) + list(domain.registry.entities.values()):
                if record.cls.meta_.provider == name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)
            logger.info("Created schema", domain=domain.name, provider=name)


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for name, provider in _relational_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            logger.info("Dropped schema", domain=domain.name, provider=name)
