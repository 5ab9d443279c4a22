"""Read access to projects with their costs, billings and transactions."""

from uuid import UUID

from sqlalchemy import select

from geoacct_kernel.domain.dtos import ProjectSnapshot
from geoacct_kernel.exceptions import ProjectNotFoundError
from geoacct_kernel.models.project import Project
from geoacct_kernel.selectors.base import BaseSelector


class ProjectSelector(BaseSelector[Project]):

    def get(self, project_id: UUID) -> ProjectSnapshot:
        """
        Raises:
            ProjectNotFoundError: no project with ``project_id``.
        """
        row = self.session.get(Project, project_id, populate_existing=True)
        if row is None:
            raise ProjectNotFoundError(str(project_id))
        return row.to_dto()

    def all(self) -> list[ProjectSnapshot]:
        rows = self.session.scalars(
            select(Project)
            .order_by(Project.project_code)
            .execution_options(populate_existing=True)
        )
        return [row.to_dto() for row in rows]
