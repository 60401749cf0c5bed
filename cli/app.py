#!/usr/bin/env python3
from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

import questionary
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.traceback import install

from crm.hubspot import (
    ABSENT,
    RESOURCES,
    ConfigurationError,
    CrmError,
    RecordDelete,
    RecordRead,
    RecordWrite,
    Resource,
    ResourceClient,
    SearchQuery,
    client_for,
    env_render,
    load_settings,
)
from crm.hubspot.constants import DEFAULT_SEARCH_LIMIT, PROVIDER_MAX_SEARCH_LIMIT
from crm.hubspot.redaction import mask_token
from crm.runtime.events import RuntimeEvent, set_emitter

from .constants import PREVIEW_ROWS, SECRETS_FILE
from .secrets import delete_secret, load_credentials, update_secret
from .ui import (
    format_event_line,
    render_error_panel,
    render_record_output,
    render_records_table,
    render_search_output,
)

install()
console = Console()

OPERATIONS = ["Create", "Get", "Update", "Delete", "Search"]


# =============================================================================
# Input parsing
# =============================================================================


def parse_csv(raw: Optional[str]) -> Any:
    """'a, b,,c' -> ['a', 'b', 'c']; blank -> ABSENT."""
    items = [p.strip() for p in (raw or "").split(",") if p.strip()]
    return items if items else ABSENT


def parse_json(raw: Optional[str], *, field: str, expect: type) -> Any:
    text = (raw or "").strip()
    if not text:
        return ABSENT
    try:
        value = json.loads(text)
    except ValueError as e:
        raise ConfigurationError(f"{field} is not valid JSON: {e}", field=field) from e
    if not isinstance(value, expect):
        raise ConfigurationError(f"{field} must be a JSON {expect.__name__}", field=field)
    return value


def parse_sorts(raw: Optional[str]) -> Any:
    """'createdate:DESCENDING, name' -> [{'propertyName': 'createdate', 'direction': 'DESCENDING'}, ...]"""
    items = parse_csv(raw)
    if items is ABSENT:
        return ABSENT
    sorts: List[Dict[str, str]] = []
    for item in items:
        name, _, direction = item.partition(":")
        direction = (direction or "ASCENDING").strip().upper()
        if direction not in ("ASCENDING", "DESCENDING"):
            raise ConfigurationError(f"sort direction must be ASCENDING or DESCENDING, got {direction!r}", field="sorts")
        sorts.append({"propertyName": name.strip(), "direction": direction})
    return sorts


# =============================================================================
# Prompts
# =============================================================================


def _ask_text(prompt: str, *, required: bool = False) -> Optional[str]:
    suffix = "" if required else " (blank to skip)"
    validate = (lambda v: bool(v.strip()) or "Required") if required else None
    return questionary.text(f"{prompt}{suffix}:", validate=validate).ask()


def prompt_fields(resource: Resource, *, for_create: bool) -> Optional[Dict[str, Any]]:
    fields: Dict[str, Any] = {}
    for spec in resource.fields:
        required = for_create and spec.required_on_create
        raw = _ask_text(spec.title or spec.attr, required=required)
        if raw is None:
            return None
        if raw.strip():
            fields[spec.attr] = raw.strip()
    for assoc in resource.associations:
        raw = _ask_text(f"{assoc.title or assoc.attr} (comma separated)")
        if raw is None:
            return None
        ids = parse_csv(raw)
        if ids is not ABSENT:
            fields[assoc.attr] = ids
    return fields


def _ask_record_id(resource: Resource) -> Optional[str]:
    return _ask_text(resource.id_field.replace("_", " ").capitalize(), required=True)


# =============================================================================
# Flows
# =============================================================================


def run_operation(client: ResourceClient, operation: str) -> None:
    resource = client.resource
    credentials = load_credentials()

    if operation == "Create":
        fields = prompt_fields(resource, for_create=True)
        if fields is None:
            return
        extra = parse_json(_ask_text("Additional properties (JSON object)"), field="additional_properties", expect=dict)
        out = client.create(RecordWrite(credentials, fields=fields, additional_properties=extra))
        console.print(render_record_output(resource.name, "create", out))
        return

    if operation == "Update":
        record_id = _ask_record_id(resource)
        if record_id is None:
            return
        fields = prompt_fields(resource, for_create=False)
        if fields is None:
            return
        extra = parse_json(_ask_text("Additional properties (JSON object)"), field="additional_properties", expect=dict)
        out = client.update(RecordWrite(credentials, fields=fields, additional_properties=extra, record_id=record_id))
        console.print(render_record_output(resource.name, "update", out))
        return

    if operation == "Get":
        record_id = _ask_record_id(resource)
        if record_id is None:
            return
        props = parse_csv(_ask_text("Properties (comma separated)"))
        out = client.get(RecordRead(credentials, record_id=record_id, properties=props))
        console.print(render_record_output(resource.name, "get", out))
        console.print(render_records_table(client.store.read(out.uri), limit=PREVIEW_ROWS))
        return

    if operation == "Delete":
        record_id = _ask_record_id(resource)
        if record_id is None:
            return
        if not questionary.confirm(f"Delete {resource.name} {record_id}?", default=False).ask():
            return
        client.delete(RecordDelete(credentials, record_id=record_id))
        console.print(Panel(f"[green]Deleted {resource.name} {record_id}[/green]"))
        return

    if operation == "Search":
        query = SearchQuery(
            query=(_ask_text("Query") or "").strip() or ABSENT,
            properties=parse_csv(_ask_text("Properties (comma separated)")),
            filter_groups=parse_json(_ask_text("Filter groups (JSON list)"), field="filter_groups", expect=list),
            sorts=parse_sorts(_ask_text("Sorts (property[:DESCENDING], comma separated)")),
            limit=(_ask_text(f"Page size (default {DEFAULT_SEARCH_LIMIT}, max {PROVIDER_MAX_SEARCH_LIMIT})") or "").strip() or ABSENT,
            fetch_all_pages=bool(questionary.confirm("Fetch all pages?", default=False).ask()),
        )
        out = client.search(query, credentials)
        console.print(render_search_output(resource.name, out))
        if out.total:
            console.print(render_records_table(client.store.read(out.uri), limit=PREVIEW_ROWS))
        return

    raise ConfigurationError(f"unknown operation {operation!r}", field="operation")


def credentials_flow() -> None:
    console.clear()
    console.print(Panel("[bold cyan]Credentials[/bold cyan]"))
    action = questionary.select(
        "Choose operation:",
        choices=["🔑 Save API key", "🎫 Save OAuth token", "🗑️  Remove stored credentials", "↩️ Back"],
    ).ask()
    if not action or "Back" in action:
        return

    if "Remove" in action:
        delete_secret()
        console.print("[green]Stored credentials removed.[/green]")
    else:
        key = "api_key" if "API key" in action else "oauth_token"
        value = questionary.password(f"{key}:").ask() or ""
        if not value.strip():
            return
        update_secret({key: value.strip()})
        console.print(f"[green]Saved {key} {mask_token(value.strip())} to {os.path.abspath(SECRETS_FILE)}[/green]")
    input("\nPress Enter...")


def _status_table() -> Table:
    creds = load_credentials()
    settings = load_settings()
    table = Table(show_header=False, box=None)
    table.add_row("🔑 API key:", "[green]set[/green]" if creds.api_key is not ABSENT else "[dim]not set[/dim]")
    table.add_row("🎫 OAuth token:", "[green]set[/green]" if creds.oauth_token is not ABSENT else "[dim]not set[/dim]")
    table.add_row("🌐 Base URL:", settings.base_url)
    table.add_row("🧾 Artifacts:", os.path.abspath(settings.storage_dir))
    return table


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
    )


def cli_emitter(ev: RuntimeEvent) -> None:
    style = {"error": "red", "warn": "yellow"}.get(ev.level, "dim")
    console.print(f"[{style}]{escape(format_event_line(ev, include_level=True))}[/{style}]", highlight=False)


def main() -> None:
    load_dotenv()
    configure_logging(verbose=os.getenv("CRM_VERBOSE", "").strip().lower() in ("1", "true", "yes", "y", "on"))
    set_emitter(cli_emitter)

    while True:
        console.clear()
        console.print(Panel.fit("[bold magenta]HubSpot CRM Objects[/bold magenta]"))
        try:
            console.print(Panel(_status_table(), title="Status"))
        except ConfigurationError as e:
            console.print(render_error_panel(e))

        choices = [f"📇 {name}" for name in RESOURCES] + ["🔑 Credentials", "👋 Exit"]
        action = questionary.select("Choose action:", choices=choices).ask()

        if not action or "Exit" in action:
            sys.exit(0)

        if "Credentials" in action:
            credentials_flow()
            continue

        resource_name = action.split(" ", 1)[1].strip()
        operation = questionary.select(f"{resource_name}:", choices=OPERATIONS + ["↩️ Back"]).ask()
        if not operation or "Back" in operation:
            continue

        try:
            client = client_for(resource_name, render=env_render)
            run_operation(client, operation)
        except CrmError as e:
            console.print(render_error_panel(e))
        input("\nPress Enter...")
