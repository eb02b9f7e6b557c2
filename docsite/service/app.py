"""FastAPI application exposing read-only catalog queries."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..catalog.content_catalog import CatalogView, ContentCatalog
from ..catalog.resource_id import format_resource_id
from ..config import load_playbook
from ..errors import CatalogError
from ..models import Family, VirtualFile
from ..pipeline import SiteGenerator

CatalogLike = Union[ContentCatalog, CatalogView]


class HealthResponse(BaseModel):
    status: str


class VersionEntry(BaseModel):
    version: str
    display_version: str
    title: str
    url: str


class ComponentEntry(BaseModel):
    name: str
    title: str
    url: str
    versions: List[VersionEntry]


class FileEntry(BaseModel):
    id: str
    family: str
    path: str
    out: Optional[str] = None
    url: Optional[str] = None


class ResolveRequest(BaseModel):
    spec: str
    context: Optional[str] = None
    family: Family = Family.PAGE


def _file_entry(file: VirtualFile) -> FileEntry:
    return FileEntry(
        id=format_resource_id(file.src.id),
        family=file.src.family.value,
        path=file.path,
        out=file.out.path if file.out else None,
        url=file.pub.url if file.pub else None,
    )


def create_app(
    catalog_factory: Callable[[], CatalogLike], title: Optional[str] = None
) -> FastAPI:
    """Create the FastAPI application serving lookups against a built catalog.

    ``title`` is the site title from the playbook and names the API.
    """

    app = FastAPI(title=title or "Docsite Catalog Service", version="1.0.0")

    async def get_catalog() -> CatalogLike:
        return catalog_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/components", response_model=List[ComponentEntry])
    async def components(catalog: CatalogLike = Depends(get_catalog)) -> List[ComponentEntry]:
        return [ComponentEntry(**component.to_dict()) for component in catalog.get_components()]

    @app.get("/files", response_model=List[FileEntry])
    async def files(
        family: Optional[Family] = None,
        catalog: CatalogLike = Depends(get_catalog),
    ) -> List[FileEntry]:
        selected = catalog.find_by(family=family) if family else catalog.get_all()
        return [_file_entry(file) for file in selected]

    @app.post("/resolve", response_model=FileEntry)
    async def resolve(
        payload: ResolveRequest,
        catalog: CatalogLike = Depends(get_catalog),
    ) -> FileEntry:
        context = None
        if payload.context:
            context_page = catalog.resolve_page(payload.context)
            if context_page is None:
                raise HTTPException(status_code=404, detail=f"Context page not found: {payload.context}")
            context = context_page.src
        resolved = catalog.resolve_resource(payload.spec, context, [payload.family], payload.family)
        if resolved is None:
            raise HTTPException(status_code=404, detail=f"Unresolved {payload.family.value} reference: {payload.spec}")
        return _file_entry(resolved)

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(_: Any, exc: CatalogError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    playbook_path: Path, host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    """Build the site catalog once and serve it until interrupted."""
    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install docsite[service]`."
        ) from exc

    playbook = load_playbook(playbook_path)
    view = SiteGenerator(playbook).build().catalog.export_to_model()
    app = create_app(lambda: view, title=playbook.site.title)
    uvicorn.run(app, host=host, port=port)
