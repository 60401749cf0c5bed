# crm/hubspot/operations.py
from __future__ import annotations

import logging
from typing import Optional, Union

from crm.utils import SessionFactory, session_factory

from .client import HubSpotClient
from .config import HubSpotSettings, load_settings
from .credentials import Credentials
from .errors import ConfigurationError
from .events import records_stored
from .models import RecordDelete, RecordOutput, RecordRead, RecordWrite, SearchOutput, SearchQuery
from .rendering import ABSENT, Renderer, identity_render, render_string
from .request_spec import RequestSpecBuilder
from .resources import Resource, get_resource
from .responses import ResourceRecord
from .search import SearchAggregator
from .storage import LocalStorage, ResultStore

logger = logging.getLogger(__name__)


class ResourceClient:
    """
    Create / get / update / delete / search for one resource kind.

    Every operation resolves credentials, builds its RequestSpec, executes it,
    and (except delete) writes the resulting property bag(s) to the result store.
    """

    def __init__(
        self,
        resource: Resource,
        *,
        http: HubSpotClient,
        store: ResultStore,
        render: Renderer = identity_render,
        settings: Optional[HubSpotSettings] = None,
    ):
        self.resource = resource
        self.settings = settings or HubSpotSettings()
        self.http = http
        self.store = store
        self.render = render
        self.builder = RequestSpecBuilder(resource, base_url=self.settings.base_url, render=render)

    def _store_one(self, operation: str, record: ResourceRecord) -> RecordOutput:
        uri = self.store.store([record.properties])
        records_stored(resource=self.resource.name, operation=operation, count=1, uri=uri)
        return RecordOutput(id=record.id, uri=uri)

    def create(self, request: RecordWrite) -> RecordOutput:
        if request.record_id is not ABSENT:
            raise ConfigurationError("record_id must not be set on create", field=self.resource.id_field)
        spec = self.builder.create(request.credentials, request.fields, request.additional_properties)
        record = self.http.call(spec, resource=self.resource.name, operation="create", response_model=ResourceRecord)
        logger.info("Created HubSpot %s record %s", self.resource.name, record.id)
        return self._store_one("create", record)

    def get(self, request: RecordRead) -> RecordOutput:
        spec = self.builder.get(request.credentials, request.record_id, request.properties)
        record = self.http.call(spec, resource=self.resource.name, operation="get", response_model=ResourceRecord)
        return self._store_one("get", record)

    def update(self, request: RecordWrite) -> RecordOutput:
        spec = self.builder.update(request.credentials, request.record_id, request.fields, request.additional_properties)
        record = self.http.call(spec, resource=self.resource.name, operation="update", response_model=ResourceRecord)
        logger.info("Updated HubSpot %s record %s", self.resource.name, record.id)
        return self._store_one("update", record)

    def delete(self, request: RecordDelete) -> None:
        spec = self.builder.delete(request.credentials, request.record_id)
        self.http.call(spec, resource=self.resource.name, operation="delete")
        record_id = render_string(self.render, request.record_id, field=self.resource.id_field)
        logger.info("Deleted HubSpot %s record %s", self.resource.name, str(record_id).strip())

    def search(self, query: SearchQuery, credentials: Credentials) -> SearchOutput:
        aggregator = SearchAggregator(
            self.builder,
            self.http,
            self.store,
            max_pages=self.settings.max_search_pages,
        )
        return aggregator.run(query, credentials)


def client_for(
    resource: Union[str, Resource],
    *,
    settings: Optional[HubSpotSettings] = None,
    render: Renderer = identity_render,
    store: Optional[ResultStore] = None,
    sessions: Optional[SessionFactory] = None,
) -> ResourceClient:
    """
    Wire a ResourceClient with default collaborators.

    settings default to `load_settings()` (environment aware); the store
    defaults to LocalStorage under settings.storage_dir.
    """
    res = get_resource(resource) if isinstance(resource, str) else resource
    cfg = settings or load_settings()
    http = HubSpotClient(
        timeout=cfg.timeout,
        sessions=sessions or session_factory(retries=cfg.retries, backoff_factor=cfg.backoff_factor),
    )
    return ResourceClient(
        res,
        http=http,
        store=store or ResultStore(LocalStorage(cfg.storage_dir)),
        render=render,
        settings=cfg,
    )
