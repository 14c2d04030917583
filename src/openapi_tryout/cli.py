"""CLI entry point for openapi-tryout."""

import json
import logging
from pathlib import Path

import click

from openapi_tryout.config import SynthConfig
from openapi_tryout.parser.base import Endpoint, OpenApiDocument
from openapi_tryout.parser.openapi import SpecLoadError, find_endpoint, first_endpoint, iter_endpoints, load_document
from openapi_tryout.proxy.executor import RequestExecutionError, error_response, execute_request
from openapi_tryout.storage import SpecStore, StoredSpec, parse_stored
from openapi_tryout.synth.builder import build_endpoint_defaults, default_server_url, is_dummy_fallback_url
from openapi_tryout.synth.edits import set_auth, set_header, set_param
from openapi_tryout.synth.example import generate_example
from openapi_tryout.synth.models import RequestModel
from openapi_tryout.synth.refs import resolve_ref
from openapi_tryout.synth.serialize import serialize


def _load(doc_path: Path) -> OpenApiDocument:
    try:
        return load_document(doc_path)
    except SpecLoadError as e:
        raise click.ClickException(str(e)) from e


def _select(doc: OpenApiDocument, method: str | None, path: str | None) -> Endpoint:
    if method is None and path is None:
        endpoint = first_endpoint(doc)
        if endpoint is None:
            raise click.ClickException("Document declares no operations")
        return endpoint
    if method is None or path is None:
        raise click.UsageError("METHOD and PATH must be given together")
    endpoint = find_endpoint(doc, method, path)
    if endpoint is None:
        raise click.ClickException(f"No operation {method.upper()} {path} in document")
    return endpoint


def _echo_endpoints(doc: OpenApiDocument):
    for ep in iter_endpoints(doc):
        click.echo(f"{ep.method:<7} {ep.path}  {ep.summary}".rstrip())


def _get_stored(spec_store: SpecStore, spec_id: str) -> StoredSpec:
    try:
        spec = spec_store.get_spec(spec_id)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    if spec is None:
        raise click.ClickException("Specification not found")
    return spec


def _split_pair(value: str, option: str) -> tuple[str, str]:
    key, sep, val = value.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected key=value, got {value!r}", param_hint=option)
    return key, val


def _request_options(func):
    options = [
        click.option("--server", default=None, help="Base URL to use instead of the document's first server."),
        click.option("-p", "--param", "params", multiple=True, help="Parameter value as key=value."),
        click.option("-H", "--header", "headers", multiple=True, help="Header value as key=value."),
        click.option("--body", default=None, help="Raw request body."),
        click.option("--token", default=None, help="Bearer token."),
        click.option("--api-key", default=None, help="API key (sent as X-API-Key)."),
        click.option("--username", default=None, help="Basic auth username."),
        click.option("--password", default=None, help="Basic auth password."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_request(config: SynthConfig, doc_path: Path, method: str, path: str, server, params, headers, body,
                   token, api_key, username, password) -> RequestModel:
    doc = _load(doc_path)
    model = build_endpoint_defaults(_select(doc, method, path), doc, server=server, config=config)
    if is_dummy_fallback_url(server or default_server_url(doc, config), doc, config):
        click.echo(f"Warning: document declares no servers, using {config.fallback_url}", err=True)

    for value in params:
        model = set_param(model, *_split_pair(value, "--param"))
    for value in headers:
        model = set_header(model, *_split_pair(value, "--header"))
    if body is not None:
        model = model.model_copy(update={"body": body})
    return set_auth(model, token=token, api_key=api_key, username=username, password=password)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx, verbose: bool):
    """openapi-tryout: build and send requests from OpenAPI documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = SynthConfig.from_env()


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
def endpoints(doc_path: Path):
    """List the operations declared in a document."""
    _echo_endpoints(_load(doc_path))


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.argument("method", required=False)
@click.argument("path", required=False)
@click.option("--server", default=None, help="Base URL to use instead of the document's first server.")
@click.pass_obj
def defaults(config: SynthConfig, doc_path: Path, method: str | None, path: str | None, server: str | None):
    """Print the request seeded from an operation (the first one when METHOD and PATH are omitted)."""
    doc = _load(doc_path)
    model = build_endpoint_defaults(_select(doc, method, path), doc, server=server, config=config)
    click.echo(model.model_dump_json(indent=2))


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.argument("pointer")
def example(doc_path: Path, pointer: str):
    """Print an example value for the schema at POINTER (e.g. '#/components/schemas/Pet')."""
    doc = _load(doc_path)
    schema = resolve_ref(pointer, doc)
    if not isinstance(schema, dict):
        raise click.ClickException(f"Cannot resolve {pointer}")
    click.echo(generate_example(schema, 0, doc))


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.argument("method")
@click.argument("path")
@_request_options
@click.pass_obj
def build(config: SynthConfig, doc_path: Path, method: str, path: str, **options):
    """Print the serialized request for an operation."""
    model = _build_request(config, doc_path, method, path, **options)
    click.echo(json.dumps(serialize(model).to_payload(), indent=2, ensure_ascii=False))


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.argument("method")
@click.argument("path")
@_request_options
@click.pass_obj
def send(config: SynthConfig, doc_path: Path, method: str, path: str, **options):
    """Build the request for an operation, send it and print the response."""
    model = _build_request(config, doc_path, method, path, **options)
    descriptor = serialize(model)
    click.echo(f"{descriptor.method} {descriptor.url}", err=True)
    try:
        response = execute_request(descriptor, timeout=config.timeout)
    except RequestExecutionError as e:
        response = error_response(str(e))
    click.echo(f"{response.status} {response.status_text} ({response.time}ms, {response.size:.2f}KB)", err=True)
    body = response.body
    click.echo(body if isinstance(body, str) else json.dumps(body, indent=2, ensure_ascii=False))
    if response.status == 0:
        click.get_current_context().exit(1)


@main.group()
@click.option("--store-dir", default=None, type=click.Path(file_okay=False, path_type=Path),
              help="Directory holding stored specs.")
@click.pass_context
def store(ctx, store_dir: Path | None):
    """Manage stored specs."""
    ctx.obj = SpecStore(store_dir or ctx.obj.store_dir)


@store.command("add")
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("--id", "spec_id", default=None, help="Spec id (defaults to the file name).")
@click.option("--title", default=None, help="Title (defaults to info.title).")
@click.pass_obj
def store_add(spec_store: SpecStore, doc_path: Path, spec_id: str | None, title: str | None):
    """Save a document into the store."""
    doc = _load(doc_path)
    spec = StoredSpec(
        id=spec_id or doc_path.stem,
        title=title or doc.info.title or doc_path.stem,
        content=doc_path.read_text(encoding="utf-8"),
        version=doc.info.version,
    )
    try:
        saved = spec_store.save_spec(spec)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Stored {saved.id} ({saved.title})")


@store.command("list")
@click.pass_obj
def store_list(spec_store: SpecStore):
    """List stored specs."""
    for spec in spec_store.list_specs():
        click.echo(f"{spec.id}  {spec.title}  {spec.version}".rstrip())


@store.command("show")
@click.argument("spec_id")
@click.pass_obj
def store_show(spec_store: SpecStore, spec_id: str):
    """Print a stored spec's content."""
    click.echo(_get_stored(spec_store, spec_id).content)


@store.command("endpoints")
@click.argument("spec_id")
@click.pass_obj
def store_endpoints(spec_store: SpecStore, spec_id: str):
    """List the operations of a stored spec."""
    spec = _get_stored(spec_store, spec_id)
    try:
        doc = parse_stored(spec)
    except SpecLoadError as e:
        raise click.ClickException(str(e)) from e
    _echo_endpoints(doc)


@store.command("remove")
@click.argument("spec_id")
@click.pass_obj
def store_remove(spec_store: SpecStore, spec_id: str):
    """Delete a stored spec."""
    try:
        removed = spec_store.delete_spec(spec_id)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    if not removed:
        raise click.ClickException("Specification not found")
    click.echo(f"Removed {spec_id}")
