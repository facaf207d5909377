"""Project lifecycle: create, navigate, duplicate, delete, attach sources and assets."""

from __future__ import annotations

import logging

from ..constants import Platform, ProjectStatus, SourceType, WorkflowStep
from ..storage import ContentStore
from ..utils import generate_id, now_utc
from ..workflow import next_step, previous_step, validate_step
from .models import Output, Project, ProjectAsset, ProjectSource

_logger = logging.getLogger("content")


class ProjectService:
    """Create and manage projects.

    ``current_step`` only changes through the workflow machine: one step at
    a time with ``advance``/``back``, or by direct jump with ``set_step``
    (membership checked, completion not).
    """

    def __init__(self, store: ContentStore):
        self.store = store

    def create(
        self,
        name: str,
        topic: str,
        platform: Platform,
        target_audience: str | None = None,
        content_style: str | None = None,
    ) -> Project:
        project = Project(
            name=name,
            topic=topic,
            platform=Platform(platform),
            target_audience=target_audience,
            content_style=content_style,
        )
        self.store.put(project)
        _logger.info(f"PROJECT_CREATED | project:{project.id} | platform:{project.platform.value}")
        return project

    def get(self, project_id: str) -> Project:
        return self.store.require(Project, project_id)

    def list_projects(self) -> list[Project]:
        """All projects, most recently updated first."""
        return sorted(self.store.find(Project), key=lambda p: p.updated_at, reverse=True)

    def _save(self, project: Project) -> Project:
        project.updated_at = now_utc()
        self.store.put(project)
        return project

    def set_step(self, project_id: str, step: WorkflowStep | str) -> Project:
        """Jump to any step of the project's workflow.

        Raises:
            UnsupportedError: If the step is not part of the workflow.
        """
        project = self.get(project_id)
        project.current_step = validate_step(project.platform, step)
        return self._save(project)

    def advance(self, project_id: str) -> Project:
        project = self.get(project_id)
        project.current_step = next_step(project.platform, project.current_step)
        return self._save(project)

    def back(self, project_id: str) -> Project:
        project = self.get(project_id)
        project.current_step = previous_step(project.platform, project.current_step)
        return self._save(project)

    def set_status(self, project_id: str, status: ProjectStatus) -> Project:
        project = self.get(project_id)
        project.status = ProjectStatus(status)
        return self._save(project)

    def delete(self, project_id: str) -> bool:
        """Delete a project and everything it owns."""
        deleted = self.store.delete(Project, project_id)
        if deleted:
            _logger.info(f"PROJECT_DELETED | project:{project_id}")
        return deleted

    def duplicate(self, project_id: str) -> Project:
        """Copy a project and its Output as a new in-progress remix."""
        source = self.get(project_id)
        copy = source.model_copy(update={
            "id": generate_id(),
            "name": f"Copy of {source.name}",
            "status": ProjectStatus.IN_PROGRESS,
            "current_step": WorkflowStep.HOOKS,
            "remix_of_project_id": source.id,
            "created_at": now_utc(),
            "updated_at": now_utc(),
        })
        self.store.put(copy)

        output = self.store.find_one(Output, project_id=source.id)
        if output is not None:
            self.store.put(output.model_copy(deep=True, update={
                "id": generate_id(),
                "project_id": copy.id,
                "created_at": now_utc(),
                "updated_at": now_utc(),
            }))

        _logger.info(f"PROJECT_DUPLICATED | source:{source.id} | project:{copy.id}")
        return copy

    def add_source(
        self,
        project_id: str,
        title: str,
        content: str,
        source_type: SourceType = SourceType.TEXT,
    ) -> ProjectSource:
        """Attach research material used as assistant context."""
        self.get(project_id)
        source = ProjectSource(project_id=project_id, title=title, content=content, source_type=source_type)
        self.store.put(source)
        _logger.info(f"SOURCE_ADDED | project:{project_id} | source:{source.id} | chars:{len(content)}")
        return source

    def add_asset(self, project_id: str, filename: str, data: bytes, mime_type: str = "image/png") -> ProjectAsset:
        """Attach a reference image (logo, brand photo) to a project."""
        self.get(project_id)
        asset = ProjectAsset(project_id=project_id, filename=filename, mime_type=mime_type, data=data)
        self.store.put(asset)
        _logger.info(f"ASSET_ADDED | project:{project_id} | asset:{asset.id} | bytes:{len(data)}")
        return asset
