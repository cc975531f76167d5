# connectors/registry.py
# source_type -> connector instance, built once at import.
from typing import Dict, List

from connectors.adp import ADPConnector
from connectors.ashby import AshbyConnector
from connectors.bamboohr import BambooHRConnector
from connectors.base import Connector, ConnectorError
from connectors.collage import CollageConnector
from connectors.custom import CustomConnector
from connectors.greenhouse import GreenhouseConnector
from connectors.lever import LeverConnector
from connectors.rippling import RipplingConnector
from connectors.workday import WorkdayConnector


class UnsupportedSourceType(ConnectorError):
    pass


CONNECTORS: Dict[str, Connector] = {
    c.source_type: c
    for c in (
        GreenhouseConnector(),
        LeverConnector(),
        WorkdayConnector(),
        BambooHRConnector(),
        ADPConnector(),
        AshbyConnector(),
        RipplingConnector(),
        CollageConnector(),
        CustomConnector(),
    )
}


def available_source_types() -> List[str]:
    return list(CONNECTORS)


def is_supported(source_type: str) -> bool:
    return source_type in CONNECTORS


def resolve(source_type: str) -> Connector:
    try:
        return CONNECTORS[source_type]
    except KeyError:
        raise UnsupportedSourceType(
            f"Unsupported job source type: {source_type}. Supported types: {', '.join(CONNECTORS)}"
        ) from None


def describe_source_types() -> List[Dict[str, str]]:
    """type / label / identifier hint, in registration order, for the source form."""
    return [
        {"source_type": c.source_type, "label": c.label, "identifier_hint": c.identifier_hint}
        for c in CONNECTORS.values()
    ]


__all__ = ["CONNECTORS", "UnsupportedSourceType", "resolve", "is_supported", "available_source_types", "describe_source_types"]
