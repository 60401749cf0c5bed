# crm/hubspot/resources.py
"""
Per-resource configuration records.

A resource kind only differs from another in its base path, the ordered table
mapping typed fields to HubSpot property keys, and (for deals) the association
targets it accepts. The tables are evaluated top to bottom; caller-supplied
additional properties are applied after them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from .constants import OBJECTS_PATH
from .errors import ConfigurationError

Coerce = Callable[[Any], Any]


def _as_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("expected a number")
    return float(value)


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("expected an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value!r} is not a whole number")
    return int(value)


TICKET_PRIORITIES = ("LOW", "MEDIUM", "HIGH")


def _ticket_priority(value: Any) -> str:
    v = str(value).strip().upper()
    if v not in TICKET_PRIORITIES:
        raise ValueError(f"must be one of {', '.join(TICKET_PRIORITIES)}")
    return v


@dataclass(frozen=True)
class FieldSpec:
    attr: str
    api_key: str
    required_on_create: bool = False
    coerce: Optional[Coerce] = None
    create_default: Any = None
    title: str = ""

    def apply(self, value: Any) -> Any:
        if self.coerce is None:
            return value
        try:
            return self.coerce(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid value for {self.attr}: {e}", field=self.attr) from e


@dataclass(frozen=True)
class AssociationSpec:
    """IDs given under `attr` are associated to `to_object` with a HubSpot-defined type id."""
    attr: str
    to_object: str
    type_id: int
    title: str = ""


@dataclass(frozen=True)
class Resource:
    name: str
    object_type: str
    id_field: str
    fields: Tuple[FieldSpec, ...] = ()
    associations: Tuple[AssociationSpec, ...] = ()

    @property
    def path(self) -> str:
        return f"{OBJECTS_PATH}/{self.object_type}"

    @property
    def search_path(self) -> str:
        return f"{self.path}/search"

    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.attr for f in self.fields) + tuple(a.attr for a in self.associations)


COMPANIES = Resource(
    name="companies",
    object_type="companies",
    id_field="company_id",
    fields=(
        FieldSpec("name", "name", required_on_create=True, title="Company name"),
        FieldSpec("domain", "domain", required_on_create=True, title="Company domain"),
        FieldSpec("company_description", "description", title="Company description"),
        FieldSpec("industry", "industry", title="Industry"),
        FieldSpec("company_type", "type", title="Company type (e.g. PROSPECT, PARTNER)"),
    ),
)

CONTACTS = Resource(
    name="contacts",
    object_type="contacts",
    id_field="contact_id",
    fields=(
        FieldSpec("email", "email", required_on_create=True, title="Contact email"),
        FieldSpec("first_name", "firstname", title="First name"),
        FieldSpec("last_name", "lastname", title="Last name"),
        FieldSpec("phone", "phone", title="Phone number"),
        FieldSpec("job_title", "jobtitle", title="Job title"),
        FieldSpec("lifecycle_stage", "lifecyclestage", title="Lifecycle stage"),
    ),
)

DEALS = Resource(
    name="deals",
    object_type="deals",
    id_field="deal_id",
    fields=(
        FieldSpec("name", "dealname", required_on_create=True, title="Deal name"),
        FieldSpec("pipeline", "pipeline", required_on_create=True, title="Pipeline ID"),
        FieldSpec("stage", "dealstage", required_on_create=True, title="Deal stage"),
        FieldSpec("amount", "amount", coerce=_as_float, title="Deal amount"),
        FieldSpec("close_date", "closedate", title="Close date"),
        FieldSpec("deal_type", "dealtype", title="Deal type"),
    ),
    associations=(
        # deal -> company / deal -> contact (HUBSPOT_DEFINED)
        AssociationSpec("associated_company_ids", "companies", 5, title="Associated company IDs"),
        AssociationSpec("associated_contact_ids", "contacts", 3, title="Associated contact IDs"),
    ),
)

TICKETS = Resource(
    name="tickets",
    object_type="tickets",
    id_field="ticket_id",
    fields=(
        FieldSpec("subject", "subject", title="Ticket subject"),
        FieldSpec("content", "content", title="Ticket body"),
        FieldSpec("pipeline", "hs_pipeline", coerce=_as_int, title="Ticket pipeline"),
        FieldSpec("stage", "hs_pipeline_stage", coerce=_as_int, create_default=1, title="Ticket pipeline stage"),
        FieldSpec("priority", "hs_ticket_priority", coerce=_ticket_priority, title="Ticket priority (LOW, MEDIUM, HIGH)"),
    ),
)

RESOURCES: Dict[str, Resource] = {r.name: r for r in (COMPANIES, CONTACTS, DEALS, TICKETS)}


def get_resource(name: str) -> Resource:
    key = (name or "").strip().lower()
    try:
        return RESOURCES[key]
    except KeyError:
        raise ConfigurationError(
            f"unknown resource {name!r}; expected one of {', '.join(sorted(RESOURCES))}",
            field="resource",
        ) from None
