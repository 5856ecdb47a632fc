import logging
import secrets
from functools import lru_cache
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from resultdesk.config.logging_setup import configure_logging
from resultdesk.config.settings import Settings, settings
from resultdesk.core.errors import PUBLIC_DENIAL_MESSAGE, AccessDenied, InvalidArgument
from resultdesk.services import presenters
from resultdesk.services.result_service import ResultService, ResultServiceError
from resultdesk.services.snapshot_store import SnapshotError

logger = logging.getLogger(__name__)

configure_logging(settings.log_level)

app = FastAPI(title="ResultDesk API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class PublicationPayload(BaseModel):
    term: str = Field(min_length=1)
    is_published: bool = Field(alias="isPublished")
    force: bool = False


def get_settings() -> Settings:
    return settings


@lru_cache(maxsize=1)
def get_result_service() -> ResultService:
    try:
        return ResultService.from_settings()
    except SnapshotError as exc:
        logger.error("Result snapshot could not be loaded: %s", exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Service unavailable") from exc


def require_admin(
    x_admin_key: Optional[str] = Header(default=None),
    config: Settings = Depends(get_settings),
) -> None:
    if not x_admin_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing x-admin-key header")
    if not config.admin_api_key or not secrets.compare_digest(x_admin_key, config.admin_api_key):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin key")


def _not_available() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PUBLIC_DENIAL_MESSAGE)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/classes/{class_name}/results/{term}", dependencies=[Depends(require_admin)])
def class_exam_results(class_name: str, term: str, service: ResultService = Depends(get_result_service)) -> List[Dict]:
    try:
        return [presenters.exam_to_dict(r) for r in service.class_exam_results(class_name, term)]
    except ResultServiceError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@app.get("/classes/{class_name}/overall", dependencies=[Depends(require_admin)])
def class_overall_results(class_name: str, service: ResultService = Depends(get_result_service)) -> List[Dict]:
    try:
        return [presenters.overall_to_dict(o) for o in service.class_overall_results(class_name)]
    except ResultServiceError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@app.get("/classes/{class_name}/marksheets/{student_id}", dependencies=[Depends(require_admin)])
def marksheet(class_name: str, student_id: str, service: ResultService = Depends(get_result_service)) -> Dict:
    try:
        return presenters.marksheet_to_dict(service.marksheet(class_name, student_id))
    except ResultServiceError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@app.get("/results", dependencies=[Depends(require_admin)])
def list_publications(service: ResultService = Depends(get_result_service)) -> Dict:
    items = []
    for item in service.publication_statuses():
        data = presenters.status_to_dict(item)
        data["stats"] = presenters.progress_to_dict(service.term_progress(item.term))
        items.append(data)
    return {"items": items}


@app.post("/results", dependencies=[Depends(require_admin)])
def update_publication(payload: PublicationPayload, service: ResultService = Depends(get_result_service)) -> Dict:
    try:
        updated = service.set_publication(payload.term, payload.is_published, force=payload.force)
    except ResultServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return presenters.status_to_dict(updated)


@app.get("/results/stats/{term}", dependencies=[Depends(require_admin)])
def term_stats(term: str, service: ResultService = Depends(get_result_service)) -> Dict:
    return presenters.progress_to_dict(service.term_progress(term))


@app.get("/results/public/statuses")
def public_statuses(service: ResultService = Depends(get_result_service)) -> Dict:
    return {
        "items": [
            {"term": s.term, "isPublished": s.is_published}
            for s in service.publication_statuses()
        ]
    }


@app.get("/results/public/status/{term}")
def public_status(term: str, service: ResultService = Depends(get_result_service)) -> Dict:
    current = service.publication_status(term)
    return {"term": term, "isPublished": current.is_published}


@app.get("/public/results")
def public_result(
    class_name: str = Query(alias="class"),
    roll: str = Query(),
    term: str = Query(),
    dob: Optional[str] = Query(default=None),
    service: ResultService = Depends(get_result_service),
) -> Dict:
    try:
        roll_number = int(roll.strip())
    except ValueError as exc:
        raise _not_available() from exc
    try:
        student, result = service.public_result(class_name, roll_number, term, dob=dob)
    except (AccessDenied, InvalidArgument) as exc:
        raise _not_available() from exc
    return presenters.public_result_to_dict(student, result)
