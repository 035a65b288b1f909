"""
HTTP facade that serves the generated WSDL document.

A single endpoint answers ``GET /?wsdl`` (or ``?WSDL``) with the document of
the configured service; adding ``readable`` returns the re-indented form.
Everything else is handed to a pluggable SOAP call handler, which this
package does not implement.

Architecture:
    ::

        request ──► basic auth (optional)
                      │
                      ├── GET ?wsdl[&readable] ──► WsdlGenerator.generate()
                      │                             text/xml; charset=UTF-8
                      │
                      └── anything else ──► call_handler(request)
                                            (500 when none configured)

Example:
    >>> app = create_app(WsdlServiceSettings(source_files=["DemoService.php"]))
    >>> uvicorn.run(app)
"""

from __future__ import annotations

import secrets
from typing import Awaitable, Callable

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from wsdl_automation import __version__
from wsdl_automation.cache import DocumentCache, InMemoryDocumentCache
from wsdl_automation.config import GeneratorConfig
from wsdl_automation.errors import AssemblyError, ConfigError, FormatterError
from wsdl_automation.generator import WsdlGenerator
from wsdl_automation.logging import get_logger
from wsdl_automation.settings import WsdlServiceSettings

log = get_logger(__name__)

AUTH_REALM = 'Basic realm="SOAP webservice login required"'
XML_MEDIA_TYPE = "text/xml; charset=UTF-8"

CallHandler = Callable[[Request], Awaitable[Response]]


def compute_endpoint(request: Request) -> str:
    """Request URL without its query string."""
    return str(request.url.replace(query=""))


def compute_namespace(request: Request) -> str:
    """Endpoint URL with a trailing slash."""
    endpoint = compute_endpoint(request)
    return endpoint if endpoint.endswith("/") else endpoint + "/"


def build_config(settings: WsdlServiceSettings, request: Request, readable: bool) -> GeneratorConfig:
    """Generator settings for one document request."""
    if settings.config_file:
        base = GeneratorConfig.from_yaml(settings.config_file)
    else:
        base = GeneratorConfig(source_files=settings.source_files)
    return base.with_overrides(
        namespace=settings.namespace or base.namespace or compute_namespace(request),
        endpoint=settings.endpoint or base.endpoint or compute_endpoint(request),
        service_name=settings.service_name or None,
        optimize=not readable,
        include_desc=settings.include_desc or None,
        cache_documents=settings.cache_documents,
    )


def create_app(
    settings: WsdlServiceSettings | None = None,
    *,
    call_handler: CallHandler | None = None,
    cache: DocumentCache | None = None,
) -> FastAPI:
    """Build the facade application.

    Args:
        settings: Facade settings (read from the environment when omitted)
        call_handler: Coroutine answering SOAP calls
        cache: Document cache (an in-memory cache expiring after
            ``settings.cache_ttl_seconds`` when omitted)
    """
    settings = settings or WsdlServiceSettings()
    cache = cache if cache is not None else InMemoryDocumentCache(ttl_seconds=settings.cache_ttl_seconds)

    app = FastAPI(title="wsdl-automation", version=__version__, docs_url=None, redoc_url=None)
    app.state.settings = settings

    security = HTTPBasic(auto_error=False)

    def authenticate(credentials: HTTPBasicCredentials | None = Depends(security)) -> None:
        if not settings.user:
            return
        denied = (
            credentials is None
            or credentials.username.lower() != settings.user.lower()
            or (
                bool(settings.password)
                and not secrets.compare_digest(credentials.password.encode(), settings.password.encode())
            )
        )
        if denied:
            log.warning("authentication_failed", user=credentials.username if credentials else None)
            raise HTTPException(
                status_code=401,
                detail="Authentication required",
                headers={"WWW-Authenticate": AUTH_REALM},
            )

    @app.api_route("/", methods=["GET", "POST"], dependencies=[Depends(authenticate)])
    async def endpoint(request: Request) -> Response:
        flags = {key.lower() for key in request.query_params.keys()}
        if request.method == "GET" and "wsdl" in flags:
            return _document(request, settings, cache, readable="readable" in flags)
        if call_handler is None:
            log.error("call_handler_missing", method=request.method)
            raise HTTPException(status_code=500, detail="Invalid SoapServer configuration")
        return await call_handler(request)

    return app


def _document(
    request: Request,
    settings: WsdlServiceSettings,
    cache: DocumentCache,
    readable: bool,
) -> Response:
    try:
        generator = WsdlGenerator(build_config(settings, request, readable), cache)
        document = generator.generate()
    except (AssemblyError, ConfigError, FormatterError) as e:
        log.error("document_failed", **e.to_dict())
        raise HTTPException(status_code=500, detail=e.message) from e
    return Response(content=document, media_type=XML_MEDIA_TYPE)
